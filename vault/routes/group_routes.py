"""Group management API routes."""

from fastapi import APIRouter, Depends, status

from vault.dependencies import get_vault
from vault.schemas.groups import (
    CreateGroupRequest,
    DeleteGroupResponse,
    GroupListingResponse,
    GroupResponse,
    ListGroupsResponse,
)
from vault.vault import Vault

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.get("", response_model=ListGroupsResponse)
def list_groups(vault: Vault = Depends(get_vault)):
    return ListGroupsResponse(
        groups=[
            GroupListingResponse(group_id=g.group_id, name=g.name, parent_name=g.parent_name)
            for g in vault.list_groups()
        ]
    )


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
def create_group(request: CreateGroupRequest, vault: Vault = Depends(get_vault)):
    """
    Create a group, optionally under a parent group name.

    Raises:
        - 404: Parent group not found
        - 409: Group name already taken
    """
    group = vault.create_group(request.name, request.parent)
    return GroupResponse(group_id=group.group_id, name=group.name, parent_id=group.parent_id)


@router.delete("/{name}", response_model=DeleteGroupResponse)
def delete_group(name: str, vault: Vault = Depends(get_vault)):
    """
    Delete a group and its descendants; their files move to the root group.

    Raises:
        - 400: Attempt to delete the root group
        - 404: Group not found
    """
    deleted = vault.delete_group(name)
    return DeleteGroupResponse(name=name, deleted_group_ids=deleted)

"""Pydantic schemas for group endpoints."""

from typing import List, Optional

from pydantic import BaseModel, Field


class CreateGroupRequest(BaseModel):
    """Request model for group creation."""
    name: str = Field(..., min_length=1)
    parent: Optional[str] = None


class GroupResponse(BaseModel):
    """Response model for a created group."""
    group_id: int
    name: str
    parent_id: Optional[int] = None


class GroupListingResponse(BaseModel):
    """One row of the group listing."""
    group_id: int
    name: str
    parent_name: str


class ListGroupsResponse(BaseModel):
    """Response model for group listing."""
    groups: List[GroupListingResponse]


class DeleteGroupResponse(BaseModel):
    """Response model for group deletion."""
    name: str
    deleted_group_ids: List[int]

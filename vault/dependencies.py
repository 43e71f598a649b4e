"""FastAPI dependencies."""

from fastapi import Request

from vault.vault import Vault


def get_vault(request: Request) -> Vault:
    """
    The vault bound to the running application (set on startup).
    """
    return request.app.state.vault

"""Request dependencies shared by the routers."""

from fastapi import Header, HTTPException, Request

from ordering.storefront import Storefront


def get_storefront(request: Request) -> Storefront:
    return request.app.state.storefront


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Identity of the caller, supplied by the upstream auth layer."""
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()

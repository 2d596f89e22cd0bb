"""Shared request dependencies for the v1 routers."""

from __future__ import annotations

from uuid import UUID

from fastapi import Header, HTTPException, status

from ...services.access import Caller, Role


def get_caller(
    x_account_id: UUID = Header(..., description="Account id asserted by the gateway"),
    x_role: Role = Header(..., description="Role of the calling account"),
) -> Caller:
    """Build the caller identity from gateway-supplied headers."""

    return Caller(account_id=x_account_id, role=x_role)


def require_roles(caller: Caller, *roles: Role) -> None:
    if caller.role not in roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User role {caller.role.value} is not authorized to access this route",
        )

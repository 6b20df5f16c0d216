"""
Authentication related dependencies.

The authentication middleware verifies the bearer token and stores the
caller on ``request.state.principal``; these dependencies read it back and
enforce roles.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from auth_service.core.domain.entities.principal import Principal
from auth_service.core.domain.entities.user import UserRole

logger = logging.getLogger(__name__)


async def get_current_principal(request: Request) -> Principal:
    """
    Return the authenticated caller.

    Raises:
        HTTPException: 401 if the request was not authenticated
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


CurrentPrincipalDep = Annotated[Principal, Depends(get_current_principal)]


def require_role(role: str):
    """Build a dependency that requires ``role`` (authority ``ROLE_<role>``)."""

    async def _require_role(principal: CurrentPrincipalDep) -> Principal:
        if not principal.has_role(role):
            logger.warning(f"Access denied for {principal.username or principal.subject}: missing role {role}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="The user does not have permission to perform this action.",
            )
        return principal

    return _require_role


require_admin = require_role(UserRole.ADMIN.value)

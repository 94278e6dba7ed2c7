"""Request-scoped caller identity.

Authentication happens upstream: the gateway in front of this service
verifies the session and forwards the caller as ``X-User-*`` headers.
"""

from fastapi import Depends, Header

from ordering.pricing.engine import DEFAULT_PRICE_MULTIPLIER
from ordering.shared.current_user import CurrentUser, UserRole
from ordering.shared.errors import Forbidden, Unauthorized


async def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_user_role: str = Header(default=UserRole.CUSTOMER.value),
    x_user_approved: bool = Header(default=False),
    x_price_multiplier: float = Header(default=DEFAULT_PRICE_MULTIPLIER),
) -> CurrentUser:
    if not x_user_id:
        raise Unauthorized("Unauthorized")
    return CurrentUser(
        id=x_user_id,
        approved=x_user_approved,
        role=x_user_role.upper(),
        price_multiplier=x_price_multiplier,
    )


async def get_approved_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.approved:
        raise Forbidden("Your account is not approved for purchases")
    return user


async def get_admin_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise Forbidden("Admin access required")
    return user

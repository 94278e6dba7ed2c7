"""The authenticated caller, as supplied by the external auth/session service."""

from dataclasses import dataclass
from enum import Enum


class UserRole(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    approved: bool = False
    role: str = UserRole.CUSTOMER.value
    price_multiplier: float = 1.0

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

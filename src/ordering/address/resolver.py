"""Address resolution and ownership rules.

Used by checkout to turn the caller's address selection into persisted
Address aggregates, and by profile management to add, edit, delete and pick
the default address. All writes go through the repository; when called from a
command handler they share that handler's unit of work, so multi-row changes
(clear-then-set default, unlink) commit together.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.address.address import Address
from ordering.shared.errors import InvalidAddress

logger = structlog.get_logger(__name__)

UNLINKED = "unlinked"
DELETED = "deleted"


class AddressResolver:
    def __init__(self, repository=None):
        self.repository = repository or current_domain.repository_for(Address)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def resolve_delivery_address(self, user, existing_id=None, new_address=None, save=False) -> Address:
        """Return the delivery address for an order.

        An ``existing_id`` must belong to ``user``. A ``new_address`` is
        created owner-less unless ``save`` asks to keep it on the profile.
        """
        if existing_id:
            address = self.repository.find_owned(existing_id, user.id)
            if address is None:
                logger.warning(
                    "Rejected delivery address not owned by user",
                    address_id=str(existing_id),
                    user_id=str(user.id),
                )
                raise InvalidAddress("Invalid delivery address")
            return address

        if new_address:
            address = Address.create(user_id=user.id if save else None, **new_address)
            self.repository.add(address)
            return address

        raise ValidationError({"delivery_address": ["Delivery address is required"]})

    def resolve_billing_address(self, new_address=None) -> Address | None:
        """Billing addresses are never saved to a profile; ``None`` reuses delivery."""
        if not new_address:
            return None

        address = Address.create(user_id=None, **new_address)
        self.repository.add(address)
        return address

    # -------------------------------------------------------------------
    # Profile management
    # -------------------------------------------------------------------
    def addresses_for(self, user) -> list[Address]:
        return self.repository.owned_by(user.id)

    def get_owned(self, address_id, user) -> Address:
        address = self.repository.find_owned(address_id, user.id)
        if address is None:
            raise ObjectNotFoundError(f"Address `{address_id}` not found")
        return address

    def add_address(self, user, is_default=False, **postal) -> Address:
        if is_default:
            self._clear_defaults(user)

        address = Address.create(user_id=user.id, is_default=is_default, **postal)
        self.repository.add(address)
        return address

    def update_address(self, address_id, user, is_default=None, clear=(), **changes) -> Address:
        address = self.get_owned(address_id, user)
        address.update_details(clear=clear, **changes)

        if is_default is True and not address.is_default:
            self._clear_defaults(user, keep=address)
            address.mark_default()
        elif is_default is False and address.is_default:
            address.clear_default()

        self.repository.add(address)
        return address

    def set_default(self, address_id, user) -> Address:
        """Make ``address_id`` the user's only default address."""
        address = self.get_owned(address_id, user)
        self._clear_defaults(user, keep=address)
        if not address.is_default:
            address.mark_default()
            self.repository.add(address)
        return address

    def delete_address(self, address_id, user) -> str:
        """Delete an owned address, or unlink it when an order still refers to it.

        Returns ``"unlinked"`` or ``"deleted"``.
        """
        from ordering.order.order import Order

        address = self.get_owned(address_id, user)

        if current_domain.repository_for(Order).references_address(address.id):
            address.unlink()
            self.repository.add(address)
            logger.info(
                "Address unlinked, preserved for order history",
                address_id=str(address.id),
                user_id=str(user.id),
            )
            return UNLINKED

        was_default = address.is_default
        self.repository.remove(address)
        logger.info("Address deleted", address_id=str(address_id), user_id=str(user.id))

        if was_default:
            remaining = [a for a in self.repository.owned_by(user.id) if str(a.id) != str(address_id)]
            if len(remaining) == 1:
                remaining[0].mark_default()
                self.repository.add(remaining[0])

        return DELETED

    def _clear_defaults(self, user, keep=None):
        for other in self.repository.owned_by(user.id):
            if keep is not None and str(other.id) == str(keep.id):
                continue
            if other.is_default:
                other.clear_default()
                self.repository.add(other)

"""Address aggregate — postal and contact details used by orders and profiles.

An address is its own aggregate rather than a child of the user: its owner is
a nullable back-reference (``user_id``). Checkout can create owner-less
addresses that only ever belong to one order, and a profile address that has
been used by an order is unlinked instead of deleted, so the row outlives the
ownership.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from ordering.address.events import (
    AddressAdded,
    AddressUnlinked,
    AddressUpdated,
    DefaultAddressChanged,
)
from ordering.domain import ordering

DEFAULT_COUNTRY = "US"

POSTAL_FIELDS = (
    "first_name",
    "last_name",
    "company",
    "street1",
    "street2",
    "city",
    "state",
    "zip",
    "country",
    "email",
    "phone",
)

# Optional fields a partial update may empty
CLEARABLE_FIELDS = ("company", "street2", "email", "phone")


@ordering.aggregate
class Address:
    user_id = Identifier()  # None once unlinked, or for order-only addresses
    is_default = Boolean(default=False)
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    company = String(max_length=255)
    street1 = String(required=True, max_length=255)
    street2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip = String(required=True, max_length=20)
    country = String(required=True, max_length=100, default=DEFAULT_COUNTRY)
    email = String(max_length=254)
    phone = String(max_length=30)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id=None, is_default=False, **postal):
        """Record a new address, owned by ``user_id`` or by nobody."""
        now = datetime.now(UTC)
        fields = {name: postal.get(name) for name in POSTAL_FIELDS}
        fields["country"] = fields["country"] or DEFAULT_COUNTRY

        address = cls(
            user_id=user_id,
            is_default=bool(is_default) and user_id is not None,
            created_at=now,
            updated_at=now,
            **fields,
        )
        address.raise_(
            AddressAdded(
                address_id=str(address.id),
                user_id=str(user_id) if user_id else None,
                is_default=address.is_default,
                added_at=now,
            )
        )
        return address

    def update_details(self, clear=(), **changes):
        """Apply a partial update of postal/contact fields.

        ``None`` values leave a field as it is. Optional fields named in
        ``clear`` are emptied.
        """
        for name in clear:
            if name not in CLEARABLE_FIELDS:
                raise ValidationError({name: ["Field is required and cannot be cleared"]})
        for name, value in changes.items():
            if name in POSTAL_FIELDS and value is not None:
                setattr(self, name, value)
        for name in clear:
            setattr(self, name, None)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            AddressUpdated(
                address_id=str(self.id),
                user_id=str(self.user_id) if self.user_id else None,
            )
        )

    def mark_default(self):
        self.is_default = True
        self.updated_at = datetime.now(UTC)
        self.raise_(
            DefaultAddressChanged(
                address_id=str(self.id),
                user_id=str(self.user_id),
            )
        )

    def clear_default(self):
        self.is_default = False
        self.updated_at = datetime.now(UTC)

    def unlink(self):
        """Detach from the owner, keeping the row for the orders that reference it."""
        previous_user_id = self.user_id
        now = datetime.now(UTC)
        self.user_id = None
        self.is_default = False
        self.updated_at = now

        self.raise_(
            AddressUnlinked(
                address_id=str(self.id),
                previous_user_id=str(previous_user_id),
                unlinked_at=now,
            )
        )

    def to_dict(self):
        return {name: getattr(self, name) for name in POSTAL_FIELDS}


@ordering.repository(part_of=Address)
class AddressRepository:
    def owned_by(self, user_id) -> list[Address]:
        """All addresses of a user, default first, then newest first."""
        addresses = self._dao.query.filter(user_id=str(user_id)).all().items
        newest_first = sorted(addresses, key=lambda a: a.created_at, reverse=True)
        return sorted(newest_first, key=lambda a: not a.is_default)

    def find_owned(self, address_id, user_id) -> Address | None:
        addresses = self._dao.query.filter(id=str(address_id), user_id=str(user_id)).all().items
        return addresses[0] if addresses else None

    def remove(self, address: Address) -> None:
        self._dao.delete(address)

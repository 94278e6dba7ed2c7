"""Domain events for the Address aggregate."""

from protean.fields import Boolean, DateTime, Identifier

from ordering.domain import ordering


@ordering.event(part_of="Address")
class AddressAdded:
    """A delivery or billing address was recorded."""

    __version__ = 1

    address_id = Identifier(required=True)
    user_id = Identifier()
    is_default = Boolean(default=False)
    added_at = DateTime(required=True)


@ordering.event(part_of="Address")
class AddressUpdated:
    """Postal or contact fields of a saved address changed."""

    __version__ = 1

    address_id = Identifier(required=True)
    user_id = Identifier()


@ordering.event(part_of="Address")
class DefaultAddressChanged:
    """An address became the owner's default delivery address."""

    __version__ = 1

    address_id = Identifier(required=True)
    user_id = Identifier(required=True)


@ordering.event(part_of="Address")
class AddressUnlinked:
    """An address was detached from its owner but kept for order history."""

    __version__ = 1

    address_id = Identifier(required=True)
    previous_user_id = Identifier(required=True)
    unlinked_at = DateTime(required=True)

"""Address book management: commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, String, Text

from ordering.address.address import POSTAL_FIELDS, Address
from ordering.address.resolver import AddressResolver
from ordering.domain import ordering
from ordering.shared.current_user import CurrentUser


@ordering.command(part_of="Address")
class AddAddress:
    user_id = Identifier(required=True)
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    company = String(max_length=255)
    street1 = String(required=True, max_length=255)
    street2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip = String(required=True, max_length=20)
    country = String(max_length=100)
    email = String(max_length=254)
    phone = String(max_length=30)
    is_default = Boolean(default=False)


@ordering.command(part_of="Address")
class UpdateAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    first_name = String(max_length=100)
    last_name = String(max_length=100)
    company = String(max_length=255)
    street1 = String(max_length=255)
    street2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip = String(max_length=20)
    country = String(max_length=100)
    email = String(max_length=254)
    phone = String(max_length=30)
    is_default = Boolean()
    clear_fields = Text()  # JSON list of optional fields to empty


@ordering.command(part_of="Address")
class DeleteAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@ordering.command(part_of="Address")
class SetDefaultAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@ordering.command_handler(part_of=Address)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        postal = {field: getattr(command, field, None) for field in POSTAL_FIELDS}
        address = AddressResolver().add_address(
            CurrentUser(id=command.user_id),
            is_default=bool(command.is_default),
            **postal,
        )
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        changes = {field: getattr(command, field, None) for field in POSTAL_FIELDS}
        address = AddressResolver().update_address(
            command.address_id,
            CurrentUser(id=command.user_id),
            is_default=command.is_default,
            clear=json.loads(command.clear_fields) if command.clear_fields else (),
            **changes,
        )
        return str(address.id)

    @handle(DeleteAddress)
    def delete_address(self, command):
        return AddressResolver().delete_address(command.address_id, CurrentUser(id=command.user_id))

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        address = AddressResolver().set_default(command.address_id, CurrentUser(id=command.user_id))
        return str(address.id)

"""User aggregate — the storefront's view of an authenticated account.

Authentication itself is delegated to an external OAuth provider; this
aggregate only keeps what checkout and the admin console need: display name,
phone, role and the profile address used to pre-fill the checkout form.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, String, ValueObject
from protean.utils.globals import current_domain

from storefront.domain import storefront


class UserRole(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@storefront.value_object(part_of="User")
class ProfileAddress:
    """Address on the user's profile.

    Orders copy these fields at checkout; editing the profile afterwards never
    changes past orders.
    """

    address_line1 = String(required=True, max_length=200)
    address_line2 = String(max_length=200)
    city = String(required=True, max_length=100)
    region = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@storefront.aggregate
class User:
    email = String(required=True, max_length=254, unique=True)
    name = String(max_length=100)
    phone = String(max_length=20)
    role = String(choices=UserRole, default=UserRole.CUSTOMER.value)
    address = ValueObject(ProfileAddress)
    created_at = DateTime()

    @classmethod
    def register(cls, email, name=None, phone=None, role=UserRole.CUSTOMER.value):
        return cls(
            email=email,
            name=name,
            phone=phone,
            role=role,
            created_at=datetime.now(UTC),
        )

    def change_address(self, **fields):
        self.address = ProfileAddress(**fields)


def find_user_by_email(email) -> User | None:
    if not email:
        return None
    repo = current_domain.repository_for(User)
    return repo._dao.query.filter(email=email).all().first

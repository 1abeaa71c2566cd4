"""Access guards applied after authentication.

Each guard is a pure predicate over the verified principal and a resource
descriptor. Routes apply them in a fixed order: authenticate, then
authorize the role, then authorize ownership. Admin status only matters on
routes gated by the role check; it never satisfies an ownership check.
"""

from bistro_order_service.auth.credentials import Principal
from bistro_order_service.exceptions import Forbidden
from bistro_order_service.models.user_models import User


def has_admin_role(user: User | None) -> bool:
    """True when the looked-up identity exists and holds the admin role."""
    return user is not None and user.is_admin


def owns_resource(principal: Principal, owner_email: str | None) -> bool:
    """True when the resource is scoped to the principal's own email."""
    return owner_email is not None and principal.email == owner_email


def require_admin(user: User | None) -> None:
    """Reject callers whose identity is missing or not an admin.

    Raises:
        Forbidden: Unless ``user`` is an admin
    """
    if not has_admin_role(user):
        raise Forbidden()


def require_owner(principal: Principal, owner_email: str | None) -> None:
    """Reject callers acting on a resource scoped to someone else.

    Raises:
        Forbidden: Unless ``owner_email`` is the principal's email
    """
    if not owns_resource(principal, owner_email):
        raise Forbidden()

"""FastAPI dependencies for credential verification and role checks.

Provides the building blocks the app factory wires into route dependencies.
"""

from typing import Annotated

from fastapi import Header

from bistro_order_service.auth.credentials import CredentialVerifier, Principal
from bistro_order_service.auth.guards import require_admin
from bistro_order_service.services.user_service import UserService


def get_principal_from_header(
    authorization: Annotated[str | None, Header()] = None,
    verifier: CredentialVerifier | None = None,
) -> Principal:
    """Extract and verify the bearer credential from the Authorization header.

    Args:
        authorization: Authorization header value (injected by FastAPI)
        verifier: CredentialVerifier instance

    Returns:
        Principal: The verified identity

    Raises:
        Unauthenticated: If the credential is missing or invalid
        ValueError: If no verifier is configured
    """
    if verifier is None:
        raise ValueError("A credential verifier must be configured")

    return verifier.verify_header(authorization)


async def get_admin_principal(principal: Principal, user_service: UserService) -> Principal:
    """Allow the verified identity through only if it holds the admin role.

    Raises:
        Forbidden: If the identity is unknown or not an admin
    """
    user = await user_service.get_user(principal.email)
    require_admin(user)
    return principal

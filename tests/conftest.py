"""Shared pytest fixtures and configuration for all tests."""

import os

# main.py and lambda_handler.py skip building the real application in test mode
os.environ.setdefault("ENVIRONMENT", "test")

from decimal import Decimal  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from bistro_order_service.auth.credentials import CredentialIssuer, CredentialVerifier  # noqa: E402
from bistro_order_service.models.user_models import Role, User  # noqa: E402

TEST_SECRET = "test-signing-secret"


@pytest.fixture
def mock_dynamodb() -> MagicMock:
    """A mock DynamoDB resource handing out one mock table per name.

    Every table answers scans and queries with an empty page unless a test
    overrides it, so paginated reads always terminate.
    """
    tables: dict[str, MagicMock] = {}

    def get_table(name: str) -> MagicMock:
        if name not in tables:
            table = MagicMock(name=name)
            table.scan.return_value = {"Items": [], "Count": 0}
            table.query.return_value = {"Items": [], "Count": 0}
            tables[name] = table
        return tables[name]

    resource = MagicMock()
    resource.Table.side_effect = get_table
    return resource


@pytest.fixture
def customer_email() -> str:
    """Fixture providing a standard customer email."""
    return "customer@bistro.test"


@pytest.fixture
def admin_email() -> str:
    return "admin@bistro.test"


@pytest.fixture
def customer_user(customer_email: str) -> User:
    return User(id="user_1", email=customer_email, name="Casey Customer", role=Role.STANDARD)


@pytest.fixture
def admin_user(admin_email: str) -> User:
    return User(id="user_admin", email=admin_email, name="Ada Admin", role=Role.ADMIN)


@pytest.fixture
def credential_issuer() -> CredentialIssuer:
    return CredentialIssuer(TEST_SECRET)


@pytest.fixture
def credential_verifier() -> CredentialVerifier:
    return CredentialVerifier(TEST_SECRET)


@pytest.fixture
def menu_items() -> list[dict]:
    """Fixture providing menu items as stored in DynamoDB."""
    return [
        {"id": "menu_1", "name": "Caesar Salad", "category": "salad", "price": Decimal("5")},
        {"id": "menu_2", "name": "Greek Salad", "category": "salad", "price": Decimal("7")},
        {"id": "menu_3", "name": "Margherita", "category": "pizza", "price": Decimal("9")},
    ]


@pytest.fixture
def cart_items(customer_email: str) -> list[dict]:
    """Fixture providing cart entries as stored in DynamoDB."""
    return [
        {"id": "cart_1", "email": customer_email, "menu_id": "menu_1", "price": Decimal("5")},
        {"id": "cart_2", "email": customer_email, "menu_id": "menu_3", "price": Decimal("9")},
    ]

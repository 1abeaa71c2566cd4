"""Main application entry point for the bistro order service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
import sys
from typing import Any

import boto3
from fastapi import FastAPI

from bistro_order_service.auth.credentials import CredentialIssuer, CredentialVerifier
from bistro_order_service.exceptions import UpstreamFailure
from bistro_order_service.handlers.api_handler import create_app
from bistro_order_service.observability import configure_logging, setup_observability
from bistro_order_service.repositories.data_store import DataStore
from bistro_order_service.services.analytics_service import AnalyticsService
from bistro_order_service.services.menu_service import MenuService
from bistro_order_service.services.order_service import OrderService
from bistro_order_service.services.payment_provider_client import DEFAULT_BASE_URL, PaymentProviderClient
from bistro_order_service.services.user_service import UserService

logger = logging.getLogger(__name__)

TABLE_NAME_VARIABLES = {
    "users": "DYNAMODB_USERS_TABLE",
    "menu": "DYNAMODB_MENU_TABLE",
    "reviews": "DYNAMODB_REVIEWS_TABLE",
    "carts": "DYNAMODB_CARTS_TABLE",
    "payments": "DYNAMODB_PAYMENTS_TABLE",
}


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB accepts any credentials
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def get_table_names() -> dict[str, str]:
    """Table name overrides from the environment, keyed by collection."""
    return {
        collection: os.environ[variable]
        for collection, variable in TABLE_NAME_VARIABLES.items()
        if os.getenv(variable)
    }


def get_allowed_origins() -> list[str]:
    """Parse the comma-separated CORS_ALLOWED_ORIGINS variable."""
    origins_str = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    origins = [origin.strip() for origin in origins_str.split(",") if origin.strip()]
    return origins or ["*"]


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource and the shared data store
    3. Checks that every table is reachable
    4. Creates the credential issuer/verifier and payment provider client
    5. Creates services and the FastAPI app

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If a required secret is not configured
        UpstreamFailure: If the document store cannot be reached
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing bistro order service...")

    token_secret = os.getenv("ACCESS_TOKEN_SECRET")
    payment_secret = os.getenv("PAYMENT_SECRET_KEY")
    if not token_secret or not payment_secret:
        raise ValueError("ACCESS_TOKEN_SECRET and PAYMENT_SECRET_KEY must be set in environment")

    store = DataStore(dynamodb_resource=get_dynamodb_resource(), table_names=get_table_names())
    store.check_tables()

    payment_client = PaymentProviderClient(
        secret_key=payment_secret,
        base_url=os.getenv("PAYMENT_API_BASE_URL", DEFAULT_BASE_URL),
    )

    app = create_app(
        user_service=UserService(store),
        menu_service=MenuService(store),
        order_service=OrderService(store, payment_client),
        analytics_service=AnalyticsService(store),
        credential_issuer=CredentialIssuer(token_secret),
        credential_verifier=CredentialVerifier(token_secret),
        allowed_origins=get_allowed_origins(),
    )

    if os.getenv("ENABLE_TELEMETRY", "false").lower() == "true":
        setup_observability(app)

    logger.info("Bistro order service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":
    try:
        app = create_application()
    except UpstreamFailure as e:
        logger.critical(f"Startup aborted, document store unreachable: {e}")
        sys.exit(1)
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.getenv("ENVIRONMENT", "development") == "development",
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )

"""AWS Lambda handler for API Gateway requests.

The same FastAPI application used by the uvicorn entry point is wrapped in
the Mangum ASGI adapter. The application and its DynamoDB resource are built
once per container and reused across warm invocations.
"""

import logging
import os
from typing import Any

from mangum import Mangum

logger = logging.getLogger(__name__)

_mangum_handler: Mangum | None = None


def get_mangum_handler() -> Mangum:
    """Create or retrieve the cached Mangum adapter.

    Returns:
        Mangum adapter around the configured FastAPI application
    """
    global _mangum_handler

    if _mangum_handler is not None:
        return _mangum_handler

    import main

    _mangum_handler = Mangum(main.app, lifespan="off")
    logger.info("FastAPI application initialized for Lambda")
    return _mangum_handler


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Route an API Gateway event through the FastAPI application.

    Args:
        event: The API Gateway event payload
        context: The Lambda context object

    Returns:
        API Gateway response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        result: dict[str, Any] = get_mangum_handler()(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": '{"message": "internal server error"}',
        }


# Build the application during cold start (skipped in test mode)
if os.getenv("ENVIRONMENT") != "test":
    get_mangum_handler()

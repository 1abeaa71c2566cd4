"""Unit tests for AWS Lambda handler."""

from unittest.mock import MagicMock, patch

import pytest

from src.lambda_handler import lambda_handler


@pytest.fixture
def lambda_context() -> MagicMock:
    context = MagicMock()
    context.aws_request_id = "req-123"
    return context


@pytest.mark.unit
class TestLambdaHandler:
    """Tests for lambda_handler function."""

    def test_routes_event_through_mangum(self, lambda_context: MagicMock) -> None:
        event = {"rawPath": "/health", "requestContext": {"http": {"method": "GET"}}}
        mock_handler = MagicMock(return_value={"statusCode": 200, "body": '{"status": "healthy"}'})

        with patch("src.lambda_handler.get_mangum_handler", return_value=mock_handler):
            result = lambda_handler(event, lambda_context)

        assert result["statusCode"] == 200
        mock_handler.assert_called_once_with(event, lambda_context)

    def test_unhandled_error_returns_500(self, lambda_context: MagicMock) -> None:
        mock_handler = MagicMock(side_effect=RuntimeError("boom"))

        with patch("src.lambda_handler.get_mangum_handler", return_value=mock_handler):
            result = lambda_handler({}, lambda_context)

        assert result == {"statusCode": 500, "body": '{"message": "internal server error"}'}

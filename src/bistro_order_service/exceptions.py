"""Service exceptions and their HTTP status mapping.

Every exception here is rendered as ``{"message": ...}`` by the handlers
registered in :func:`bistro_order_service.handlers.api_handler.create_app`.
"""


class BistroServiceError(Exception):
    """Base class for errors that short-circuit a request."""

    status_code: int = 500
    default_message: str = "internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(BistroServiceError):
    """Credential missing, malformed, mis-signed or expired."""

    status_code = 401
    default_message = "unauthorized access"


class Forbidden(BistroServiceError):
    """Caller is authenticated but may not act on the target resource."""

    status_code = 403
    default_message = "forbidden access"


class UpstreamFailure(BistroServiceError):
    """The document store or the payment provider rejected a call.

    No partial-state guarantee is given: a write that preceded the failing
    call within the same request stays in place.
    """

    status_code = 500
    default_message = "upstream service failure"

"""FastAPI application for the ordering API."""

import logging

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bistro_order_service.auth.api_dependencies import get_admin_principal, get_principal_from_header
from bistro_order_service.auth.credentials import CredentialIssuer, CredentialVerifier, Principal
from bistro_order_service.auth.guards import require_owner
from bistro_order_service.exceptions import BistroServiceError
from bistro_order_service.models.base import CamelModel
from bistro_order_service.models.menu_models import MenuItem, MenuItemCreate, MenuItemUpdate, Review
from bistro_order_service.models.order_models import (
    AdminStats,
    CartEntry,
    CartEntryCreate,
    CategoryStats,
    Payment,
    PaymentCreate,
    PaymentIntentRequest,
    PaymentIntentResponse,
)
from bistro_order_service.models.result_models import (
    DeleteResult,
    InsertResult,
    PaymentRecordResult,
    RegistrationResult,
    UpdateResult,
)
from bistro_order_service.models.user_models import (
    AdminStatusResponse,
    TokenRequest,
    TokenResponse,
    User,
    UserCreate,
)
from bistro_order_service.services.analytics_service import AnalyticsService
from bistro_order_service.services.menu_service import MenuService
from bistro_order_service.services.order_service import OrderService
from bistro_order_service.services.user_service import UserService

logger = logging.getLogger(__name__)


class HealthResponse(CamelModel):
    """Health check response model."""

    status: str


class MessageResponse(CamelModel):
    message: str


def create_app(
    user_service: UserService,
    menu_service: MenuService,
    order_service: OrderService,
    analytics_service: AnalyticsService,
    credential_issuer: CredentialIssuer,
    credential_verifier: CredentialVerifier,
    allowed_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Protected routes run their guards in a fixed order: credential
    verification, then the admin role check, then ownership checks.

    Args:
        user_service: Service for identities and roles
        menu_service: Service for menu items and reviews
        order_service: Service for carts, payments and payment intents
        analytics_service: Service for admin statistics
        credential_issuer: Issues access credentials
        credential_verifier: Verifies bearer credentials
        allowed_origins: CORS origins, defaults to any origin

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Bistro Order Service API",
        description="Menu, cart, payment and administration API for the restaurant",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store services in app state for access in route handlers
    app.state.user_service = user_service
    app.state.menu_service = menu_service
    app.state.order_service = order_service
    app.state.analytics_service = analytics_service
    app.state.credential_issuer = credential_issuer
    app.state.credential_verifier = credential_verifier

    @app.exception_handler(BistroServiceError)
    async def service_error_handler(request: Request, exc: BistroServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected with {exc.status_code}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Rejected inputs are not echoed back; NaN and Infinity cannot be rendered as JSON
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        logger.info(f"{request.method} {request.url.path} rejected with 422")
        return JSONResponse(status_code=422, content={"message": "validation error", "detail": errors})

    def verify_token(authorization: str | None = Header(None)) -> Principal:
        """Dependency to verify the bearer credential."""
        return get_principal_from_header(
            authorization=authorization, verifier=app.state.credential_verifier
        )

    async def verify_admin(principal: Principal = Depends(verify_token)) -> Principal:
        """Dependency to require the admin role after verification."""
        return await get_admin_principal(principal, app.state.user_service)

    @app.get("/", response_model=MessageResponse, tags=["Health"])
    async def welcome() -> MessageResponse:
        return MessageResponse(message="Welcome to the Bistro Boss ordering service")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    # Credentials

    @app.post("/jwt", response_model=TokenResponse, tags=["Auth"])
    async def issue_token(identity: TokenRequest) -> TokenResponse:
        """Issue a one-hour access credential for the given identity."""
        return TokenResponse(token=app.state.credential_issuer.issue(identity.email))

    # Users

    @app.get("/users", response_model=list[User], tags=["Users"])
    async def list_users(_admin: Principal = Depends(verify_admin)) -> list[User]:
        users: list[User] = await app.state.user_service.list_users()
        return users

    @app.get("/user/admin/{email}", response_model=AdminStatusResponse, tags=["Users"])
    async def get_admin_status(
        email: str,
        principal: Principal = Depends(verify_token),
    ) -> AdminStatusResponse:
        """Tell callers whether they themselves are admins.

        Asking about any other email is forbidden.
        """
        require_owner(principal, email)
        is_admin: bool = await app.state.user_service.is_admin(email)
        return AdminStatusResponse(admin=is_admin)

    @app.post("/users", response_model=RegistrationResult, tags=["Users"])
    async def register_user(data: UserCreate) -> RegistrationResult:
        result: RegistrationResult = await app.state.user_service.register(data)
        return result

    @app.delete("/users/{user_id}", response_model=DeleteResult, tags=["Users"])
    async def delete_user(user_id: str, _admin: Principal = Depends(verify_admin)) -> DeleteResult:
        result: DeleteResult = await app.state.user_service.delete_user(user_id)
        return result

    @app.patch("/users/admin/{user_id}", response_model=UpdateResult, tags=["Users"])
    async def promote_user(user_id: str, _admin: Principal = Depends(verify_admin)) -> UpdateResult:
        result: UpdateResult = await app.state.user_service.promote_to_admin(user_id)
        return result

    # Menu and reviews

    @app.get("/menu", response_model=list[MenuItem], tags=["Menu"])
    async def list_menu() -> list[MenuItem]:
        items: list[MenuItem] = await app.state.menu_service.list_menu()
        return items

    @app.get("/menu/{item_id}", response_model=MenuItem | None, tags=["Menu"])
    async def get_menu_item(item_id: str) -> MenuItem | None:
        item: MenuItem | None = await app.state.menu_service.get_menu_item(item_id)
        return item

    @app.post("/menu", response_model=InsertResult, tags=["Menu"])
    async def add_menu_item(
        data: MenuItemCreate,
        _admin: Principal = Depends(verify_admin),
    ) -> InsertResult:
        result: InsertResult = await app.state.menu_service.add_menu_item(data)
        return result

    @app.patch("/menu/{item_id}", response_model=UpdateResult, tags=["Menu"])
    async def update_menu_item(
        item_id: str,
        data: MenuItemUpdate,
        _admin: Principal = Depends(verify_admin),
    ) -> UpdateResult:
        result: UpdateResult = await app.state.menu_service.update_menu_item(item_id, data)
        return result

    @app.delete("/menu/{item_id}", response_model=DeleteResult, tags=["Menu"])
    async def delete_menu_item(item_id: str, _admin: Principal = Depends(verify_admin)) -> DeleteResult:
        result: DeleteResult = await app.state.menu_service.delete_menu_item(item_id)
        return result

    @app.get("/reviews", response_model=list[Review], tags=["Menu"])
    async def list_reviews() -> list[Review]:
        reviews: list[Review] = await app.state.menu_service.list_reviews()
        return reviews

    # Carts

    @app.get("/carts", response_model=list[CartEntry], tags=["Carts"])
    async def list_cart(email: str | None = None) -> list[CartEntry]:
        entries: list[CartEntry] = await app.state.order_service.list_cart(email)
        return entries

    @app.post("/carts", response_model=InsertResult, tags=["Carts"])
    async def add_to_cart(data: CartEntryCreate) -> InsertResult:
        result: InsertResult = await app.state.order_service.add_to_cart(data)
        return result

    @app.delete("/carts/{cart_id}", response_model=DeleteResult, tags=["Carts"])
    async def remove_from_cart(
        cart_id: str,
        principal: Principal = Depends(verify_token),
    ) -> DeleteResult:
        result: DeleteResult = await app.state.order_service.remove_from_cart(principal, cart_id)
        return result

    # Payments

    @app.post("/create-payment-intent", response_model=PaymentIntentResponse, tags=["Payments"])
    async def create_payment_intent(data: PaymentIntentRequest) -> PaymentIntentResponse:
        client_secret: str = await app.state.order_service.create_payment_intent(data.price)
        return PaymentIntentResponse(client_secret=client_secret)

    @app.get("/payments/{email}", response_model=list[Payment], tags=["Payments"])
    async def list_payments(
        email: str,
        principal: Principal = Depends(verify_token),
    ) -> list[Payment]:
        """Payment history, visible only to its owner."""
        require_owner(principal, email)
        payments: list[Payment] = await app.state.order_service.list_payments(email)
        return payments

    @app.post("/payments", response_model=PaymentRecordResult, tags=["Payments"])
    async def record_payment(data: PaymentCreate) -> PaymentRecordResult:
        result: PaymentRecordResult = await app.state.order_service.record_payment(data)
        return result

    # Analytics

    @app.get("/admin-stats", response_model=AdminStats, tags=["Analytics"])
    async def admin_stats(_admin: Principal = Depends(verify_admin)) -> AdminStats:
        stats: AdminStats = await app.state.analytics_service.revenue_summary()
        return stats

    @app.get("/order-stats", response_model=list[CategoryStats], tags=["Analytics"])
    async def order_stats(_admin: Principal = Depends(verify_admin)) -> list[CategoryStats]:
        stats: list[CategoryStats] = await app.state.analytics_service.order_stats()
        return stats

    return app

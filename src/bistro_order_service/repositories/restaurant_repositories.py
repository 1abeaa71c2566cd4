"""DynamoDB repositories for the five service collections.

Table layout:
    users     partition key ``email``; GSI ``id-index`` on ``id``
    menu      partition key ``id``
    reviews   partition key ``id``
    carts     partition key ``id``; GSI ``email-index`` on ``email``
    payments  partition key ``id``; GSI ``email-index`` on ``email``
"""

from bistro_order_service.models.menu_models import MenuItem, Review
from bistro_order_service.models.order_models import CartEntry, Payment
from bistro_order_service.models.result_models import DeleteResult, UpdateResult
from bistro_order_service.models.user_models import Role, User
from bistro_order_service.repositories.document_repository import DocumentRepository


class UserRepository(DocumentRepository[User]):
    """Repository for registered identities.

    The table is keyed by email; routes that address users by id go through
    the ``id-index`` global secondary index first.
    """

    model = User
    key_attribute = "email"
    indexes = {"id": "id-index"}

    def find_by_email(self, email: str) -> User | None:
        return self.find_one(email)

    def find_by_id(self, user_id: str) -> User | None:
        matches = self.find_all({"id": user_id})
        return matches[0] if matches else None

    def delete_by_id(self, user_id: str) -> DeleteResult:
        user = self.find_by_id(user_id)
        if user is None:
            return DeleteResult(deleted_count=0)
        return self.delete_one(user.email)

    def set_role(self, user_id: str, role: Role) -> UpdateResult:
        """Assign a role to the user with the given id.

        Returns:
            UpdateResult; both counts are 0 when no user has that id
        """
        user = self.find_by_id(user_id)
        if user is None:
            return UpdateResult(matched_count=0, modified_count=0)
        return self.update_fields(user.email, {"role": role.value})


class MenuRepository(DocumentRepository[MenuItem]):
    model = MenuItem


class ReviewRepository(DocumentRepository[Review]):
    model = Review


class CartRepository(DocumentRepository[CartEntry]):
    model = CartEntry
    indexes = {"email": "email-index"}


class PaymentRepository(DocumentRepository[Payment]):
    model = Payment
    indexes = {"email": "email-index"}

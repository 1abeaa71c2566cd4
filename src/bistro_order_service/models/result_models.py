"""Write-operation results returned by repositories and echoed to clients."""

from bistro_order_service.models.base import CamelModel


class InsertResult(CamelModel):
    inserted_id: str | None
    acknowledged: bool = True


class UpdateResult(CamelModel):
    matched_count: int
    modified_count: int


class DeleteResult(CamelModel):
    deleted_count: int


class RegistrationResult(CamelModel):
    """Outcome of registering an identity; ``inserted_id`` is None when it already existed."""

    message: str
    inserted_id: str | None


class PaymentRecordResult(CamelModel):
    """Both halves of the non-atomic payment write."""

    payment_result: InsertResult
    delete_result: DeleteResult

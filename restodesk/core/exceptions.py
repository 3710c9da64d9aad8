"""Domain errors raised by the service layer and rendered by the API handlers."""
from typing import Any, Dict, List, Optional


class AppError(Exception):
    status_code = 400
    code = "bad_request"

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class BadRequestError(AppError):
    pass


class UnauthorizedError(AppError):
    status_code = 401
    code = "unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class UnknownInventoryItemError(BadRequestError):
    """One or more inventory ids do not exist under the ordering restaurant."""
    code = "unknown_item"

    def __init__(self, item_ids: List[int]):
        self.item_ids = item_ids
        super().__init__(
            f"Inventory item does not exist or belongs to another restaurant (id={item_ids[0]})",
            details={"inventory_item_ids": item_ids},
        )


class InsufficientStockError(BadRequestError):
    """Carries every short line of the batch, in request order."""
    code = "insufficient_stock"

    def __init__(self, deficiencies: List[Dict[str, Any]]):
        self.deficiencies = deficiencies
        super().__init__("Not enough stock", details=deficiencies)


class StockConflictError(AppError):
    """Stock changed between the lock and the conditional decrement; retry the whole request."""
    status_code = 409
    code = "stock_conflict"

    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(
            "Stock changed while placing the order, please try again",
            details={"inventory_item_id": item_id},
        )

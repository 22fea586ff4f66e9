from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION = "VALIDATION"
    UNAVAILABLE = "UNAVAILABLE"
    INTERNAL = "INTERNAL"


class LifecycleError(Exception):
    kind = ErrorKind.INTERNAL
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, **details: object) -> None:
        super().__init__(message)
        self.details = details


class NotFoundError(LifecycleError):
    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(LifecycleError):
    kind = ErrorKind.CONFLICT
    code = "CONFLICT"


class InvalidInputError(LifecycleError):
    kind = ErrorKind.VALIDATION
    code = "INVALID_INPUT"


class UnavailableError(LifecycleError):
    kind = ErrorKind.UNAVAILABLE
    code = "UNAVAILABLE"


class TableNotFoundError(NotFoundError):
    code = "TABLE_NOT_FOUND"


class OrderNotFoundError(NotFoundError):
    code = "ORDER_NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    code = "PRODUCT_NOT_FOUND"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"


class TableNotAvailableError(ConflictError):
    code = "TABLE_NOT_AVAILABLE"


class ActiveOrderExistsError(ConflictError):
    code = "ACTIVE_ORDER_EXISTS"


class TableNotOccupiedError(ConflictError):
    code = "TABLE_NOT_OCCUPIED"


class NoActiveOrderError(ConflictError):
    code = "NO_ACTIVE_ORDER"


class OrderAlreadyReceivedError(ConflictError):
    code = "ORDER_ALREADY_RECEIVED"


class InvalidOrderTransitionError(ConflictError):
    code = "INVALID_ORDER_TRANSITION"


class ProductUnavailableError(UnavailableError):
    code = "PRODUCT_UNAVAILABLE"


class InvalidPaymentMethodError(InvalidInputError):
    code = "INVALID_PAYMENT_METHOD"


class InvalidOrderStatusError(InvalidInputError):
    code = "INVALID_ORDER_STATUS"


class CurrencyMismatchError(InvalidInputError):
    code = "CURRENCY_MISMATCH"

"""
Ошибки предметной области
Каждая ошибка несет стабильный тип (kind) и HTTP-статус, с которым она отдается клиенту
"""
import enum

class ErrorKind(str, enum.Enum):
    UNAUTHENTICATED = "Unauthenticated"
    ACCESS_DENIED = "AccessDenied"
    NOT_FOUND = "NotFound"
    VALIDATION_ERROR = "ValidationError"
    INVALID_TRANSITION = "InvalidTransition"
    RATE_LIMITED = "RateLimited"
    STORAGE_ERROR = "StorageError"

class DeliveryError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION_ERROR
    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind.value}

class Unauthenticated(DeliveryError):
    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401
    default_message = "Unauthorized. Please log in."

class AccessDenied(DeliveryError):
    kind = ErrorKind.ACCESS_DENIED
    status_code = 403
    default_message = "Access denied"

class NotFound(DeliveryError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Not found"

class ValidationError(DeliveryError):
    kind = ErrorKind.VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid request"

class OutOfDeliveryRange(ValidationError):
    default_message = "Restaurant is out of delivery range"

    def __init__(self, message: str = "", distance_km: float | None = None):
        self.distance_km = distance_km
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["distanceKm"] = self.distance_km
        return data

class InvalidTransition(DeliveryError):
    kind = ErrorKind.INVALID_TRANSITION
    status_code = 400
    default_message = "Order status change is not permitted"

class RateLimited(DeliveryError):
    kind = ErrorKind.RATE_LIMITED
    status_code = 429
    default_message = "Too many requests"

class StorageError(DeliveryError):
    kind = ErrorKind.STORAGE_ERROR
    status_code = 500
    default_message = "Storage is temporarily unavailable"

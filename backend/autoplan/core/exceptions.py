class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when the scheduler encounters a logical error or invalid state."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)

class SessionValidationError(AppError):
    """Raised when a candidate session is incomplete or malformed. Nothing is mutated."""
    def __init__(self, missing_fields: list[str], errors: list[str] | None = None):
        self.missing_fields = list(missing_fields)
        self.errors = list(errors or [])
        parts = []
        if self.missing_fields:
            parts.append(f"missing fields: {', '.join(self.missing_fields)}")
        parts.extend(self.errors)
        super().__init__(
            "Invalid session data (" + "; ".join(parts) + ")",
            status_code=422,
            details={"missing_fields": self.missing_fields, "errors": self.errors},
        )

class ConflictError(AppError):
    """Raised when an operation must stop on detected scheduling conflicts."""
    def __init__(self, conflicts: list):
        self.conflicts = list(conflicts)
        super().__init__(
            f"{len(self.conflicts)} scheduling conflict(s) detected",
            status_code=409,
            details={"conflicts": [item.model_dump() for item in self.conflicts]},
        )

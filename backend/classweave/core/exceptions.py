class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when the scheduler encounters a logical error or invalid state."""
    def __init__(self, message: str, details: dict = None, status_code: int = 400):
        super().__init__(message, status_code=status_code, details=details)

class GenerationPreconditionError(SchedulerError):
    """Raised before generation starts when required reference data is missing."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details=details, status_code=422)

class GenerationTimeoutError(SchedulerError):
    """Raised when a generation run exceeds its wall-clock budget."""
    def __init__(self, budget_seconds: float, details: dict = None):
        super().__init__(
            f"Timetable generation exceeded its time budget of {budget_seconds:g}s",
            details=details,
            status_code=503,
        )

class LessonConflictError(AppError):
    """Raised when a lesson mutation would break a hard constraint."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class TimetableLockedError(AppError):
    def __init__(self, timetable_id: str):
        super().__init__(
            "Timetable is locked and cannot be modified",
            status_code=403,
            details={"timetable_id": timetable_id},
        )

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

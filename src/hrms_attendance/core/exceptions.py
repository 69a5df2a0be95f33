class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class PunchSequenceError(ValidationError):
    """Raised when a punch does not fit the day's In/Out sequence."""


class NotFoundError(DomainError):
    """Raised when a referenced entity (e.g. an employee) does not exist."""


class DuplicateAttendanceError(DomainError):
    """Raised by storage when a record for (employee, date) already exists."""


class ConcurrentUpdateError(DomainError):
    """Raised by storage when a record changed after it was loaded."""

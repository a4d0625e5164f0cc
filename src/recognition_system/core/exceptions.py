class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "DomainError"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "ValidationError"


class AuthenticationError(DomainError):
    """Raised when no authenticated user is attached to the request."""

    kind = "AuthenticationError"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "AuthorizationError"


class NotFound(DomainError):
    """Raised when an operation needs an entity that does not exist."""

    kind = "NotFound"


class DuplicateSubmission(ValidationError):
    """The actor already has a nomination/vote in this cycle."""

    kind = "DuplicateSubmission"


class PhaseClosed(ValidationError):
    """Action attempted outside the cycle's phase state or window."""

    kind = "PhaseClosed"


class CycleAlreadyActive(ValidationError):
    kind = "CycleAlreadyActive"


class InvalidPeriod(ValidationError):
    """Month/year or phase windows are not acceptable for a new cycle."""

    kind = "InvalidPeriod"


class InvalidTransition(ValidationError):
    kind = "InvalidTransition"


class InvalidCandidate(ValidationError):
    kind = "InvalidCandidate"


class NoVotesRecorded(ValidationError):
    """Winner declaration attempted while no nominee has a vote."""

    kind = "NoVotesRecorded"


class Unavailable(Exception):
    """Storage or connectivity failure. Not a DomainError."""

    kind = "Unavailable"

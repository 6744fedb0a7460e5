"""Error hierarchy shared by the lunch bot workflows."""


class LunchbotError(RuntimeError):
    """Base class for failures raised by lunch bot workflows."""


class AuthorizationError(LunchbotError):
    """Raised when a caller is not allowed to run a command."""


class StoreError(LunchbotError):
    """Raised when the record store cannot query or persist records."""


class ConflictError(StoreError):
    """Raised when a save violates a uniqueness or reference constraint."""


class NotFoundError(LunchbotError):
    """Raised when a required record does not exist."""


class UnrecognizedRequestError(LunchbotError):
    """Raised when command text cannot be interpreted."""


class IdentityError(LunchbotError):
    """Raised when a user cannot be looked up or created."""

"""Domain errors raised by services and translated to HTTP responses by the API layer."""


class ParseError(ValueError):
    """A date string that is not a valid YYYY-MM-DD calendar day."""


class ValidationError(ValueError):
    """User input rejected before it reaches the database."""


class NotFoundError(LookupError):
    """A record id that does not exist (or is outside the caller's tenant)."""

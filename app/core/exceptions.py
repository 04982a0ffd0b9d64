from typing import Any, Dict, List, Optional


class ConfigurationError(RuntimeError):
    """A required setting is missing. Fatal at startup."""


class StoreConnectionError(RuntimeError):
    """The initial connection to the document store failed. Fatal at startup."""


class BookingApiError(Exception):
    """
    Raised by the client when the server answers with an HTTP failure
    or with a contract `errors` list.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.errors = errors or []
        self.status_code = status_code


class IncompleteBookingError(ValueError):
    """The booking form was submitted with required fields left empty."""

    def __init__(self, missing: List[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing

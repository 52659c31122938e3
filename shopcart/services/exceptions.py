# shopcart/services/exceptions.py

class ServiceError(Exception):
    """Base class for errors surfaced at the HTTP boundary."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class DomainValidationError(ServiceError):
    """Invalid domain input."""
    pass


class ResourceNotFoundError(ServiceError):
    """Resource not found."""
    pass

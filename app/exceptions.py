"""Domain exceptions raised by the risk assessment services.

The routers never build error responses themselves: these exceptions bubble
up to the handlers registered in ``app.main`` which turn them into the standard
``{"status_code", "message", "data", "errors"}`` envelope.
"""
from typing import Iterable, Optional


class ServiceException(Exception):
    status_code = 500

    def __init__(self, message: str, errors: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class NotFoundException(ServiceException):
    status_code = 404

    def __init__(self, entity: str, key):
        super().__init__(f"{entity} with ID {key} was not found")
        self.entity = entity
        self.key = key


class ValidationException(ServiceException):
    status_code = 400


class ConflictException(ServiceException):
    status_code = 409

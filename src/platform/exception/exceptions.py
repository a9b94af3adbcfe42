from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int, data: dict[str, Any] | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.data = data
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(
        self, message: str, status_code: int = 400, data: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, status_code, data)


class ValidationError(CustomBaseError):
    """Malformed or missing request fields, carries a field-error list"""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message, 400, {'errors': errors} if errors else None)
        self.errors = errors or []


class StateError(CustomBaseError):
    """Operation attempted against a terminal or wrong-state resource"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class InfrastructureError(CustomBaseError):
    """Persistence failure or broken invariant in a collaborator"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)

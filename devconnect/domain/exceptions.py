from typing import Dict, Optional


class DomainError(Exception):
    """Base class for domain-level exceptions."""


class ValidationFailed(DomainError):
    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__(", ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors


class PostNotFound(DomainError):
    pass


class CommentNotFound(DomainError):
    pass


class Unauthorized(DomainError):
    pass


class NoProfile(Unauthorized):
    pass


class AlreadyLiked(DomainError):
    pass


class NotLiked(DomainError):
    pass


class ConcurrencyConflict(DomainError):
    """The aggregate changed in the store since it was loaded."""


class StoreFailure(DomainError):
    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

"""
Users module exceptions.
"""

from shared.exceptions import ConflictError, NotFoundError


class DuplicateIdentityError(ConflictError):
    """Raised when a write would duplicate an email or phone number."""

    def __init__(self, field: str):
        super().__init__(
            f"User already exists with this {field}",
            code="DUPLICATE_IDENTITY",
            details={"field": field},
        )
        self.field = field


class UserNotFoundError(NotFoundError):
    """Raised when saving a user the store does not hold."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )

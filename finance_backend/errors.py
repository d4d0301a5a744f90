from __future__ import annotations


class FinanceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(FinanceError, ValueError):
    """Rejected user input. Raised before any entity is touched."""

    status_code = 400


class NotFoundError(FinanceError, KeyError):
    status_code = 404

    def __str__(self) -> str:
        return self.message


class StoreError(FinanceError):
    """The snapshot store could not be reached or answered garbage."""

    status_code = 502


AUTH_ERROR_MESSAGES = {
    "email-already-in-use": "This e-mail is already registered",
    "invalid-email": "Invalid e-mail",
    "user-not-found": "User not found",
    "wrong-password": "Wrong password",
    "weak-password": "Password must be at least 6 characters",
    "invalid-credential": "Wrong e-mail or password",
}
GENERIC_AUTH_MESSAGE = "Could not process the request. Please try again."


def auth_error_message(code: str | None) -> str:
    return AUTH_ERROR_MESSAGES.get(code or "", GENERIC_AUTH_MESSAGE)


class AuthError(FinanceError):
    status_code = 401

    def __init__(self, code: str) -> None:
        super().__init__(auth_error_message(code))
        self.code = code
        if code == "email-already-in-use":
            self.status_code = 409

"""
Failure types raised by the finance engine and the roster layer.

Each class carries the HTTP status the API answers with; main.py turns any
FinanceError into a {"detail": ...} response.
"""


class FinanceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FinanceError):
    status_code = 404


class ValidationError(FinanceError):
    status_code = 422


class ConflictError(FinanceError):
    status_code = 409


class StoreError(FinanceError):
    """Backend I/O or transaction failure. Safe to retry for reads only."""

    status_code = 503

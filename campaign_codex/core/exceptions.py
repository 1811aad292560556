"""Domain errors raised by the service layer.

Each maps onto one HTTP status through the handlers registered in
``campaign_codex.main``; services stay free of FastAPI imports.
"""


class CodexError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CodexError):
    """Record absent, or filtered out for the caller's role."""

    status_code = 404


class PermissionDeniedError(CodexError):
    status_code = 403


class InvalidRequestError(CodexError):
    """Bad input or a uniqueness conflict."""

    status_code = 400

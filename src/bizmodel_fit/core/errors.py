"""Error taxonomy shared by the API, the MCP server and the services.

Each error carries the HTTP status the API answers with.
"""

from __future__ import annotations


class BizFitError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BizFitError):
    """A required field is missing or malformed."""

    status_code = 400


class NotFoundError(BizFitError):
    status_code = 404


class ForbiddenError(BizFitError):
    status_code = 403


class UpstreamError(BizFitError):
    """The AI service (or another remote dependency) failed."""

    status_code = 502


class InternalError(BizFitError):
    status_code = 500


class AccessPassAlreadyHeldError(ValidationError):
    def __init__(self, user_id: int):
        super().__init__("User already has access pass")
        self.user_id = user_id


class AccessPassRequiredError(ValidationError):
    def __init__(self, user_id: int):
        super().__init__("User must have access pass first")
        self.user_id = user_id


class RetakesExhaustedError(ForbiddenError):
    def __init__(self, user_id: int):
        super().__init__("No quiz retakes remaining. Purchase more retakes to continue.")
        self.user_id = user_id

"""
Domain Errors — Typed failures with a stable reason code.

Each error maps to one HTTP status; the API serialises every one of them as
``{"detail": ..., "error_code": ...}`` so clients can branch on the code.
"""


class BureauError(Exception):
    status_code = 400
    default_code = "error"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(BureauError):
    """Malformed or missing input. The caller may retry with corrected input."""
    status_code = 400
    default_code = "validation_error"


class DuplicateClaimError(BureauError):
    """The transaction reference was already used by some claim."""
    status_code = 409
    default_code = "utr_already_used"


class ConflictError(BureauError):
    """The current state forbids the action (pending, approved or already decided)."""
    status_code = 409
    default_code = "conflict"


class NotFoundError(BureauError):
    status_code = 404
    default_code = "not_found"


class PermissionDeniedError(BureauError):
    status_code = 403
    default_code = "admin_only"


class AuthenticationError(BureauError):
    status_code = 401
    default_code = "not_authenticated"


class AssetStoreError(BureauError):
    status_code = 502
    default_code = "asset_upload_failed"

"""Vouchman exceptions."""


class VouchmanError(Exception):
    """
    Structured exception for vouch and voucher operations.

    Every error carries a machine-readable ``code``, a human message
    (defaulted per code), free-form ``data`` and the HTTP status the
    views answer with.

    Usage:
        try:
            RedemptionService.redeem(token, business_id)
        except VouchmanError as e:
            if e.code == "VOUCHER_ALREADY_REDEEMED":
                show_previous_redemption(e.data["reward"])
    """

    status_code = 500

    _default_messages = {
        "LOCATION_NOT_FOUND": "Location not found",
        "ATTEMPT_NOT_FOUND": "No pending vouch found to stop",
        "VOUCHER_NOT_FOUND": "Voucher not found",
        "VOUCHER_WRONG_BUSINESS": "Voucher not valid for this business",
        "VOUCHER_ALREADY_REDEEMED": "Voucher already redeemed",
        "VOUCHER_NOT_ACTIVE": "Voucher is not active",
        "VOUCHER_SIGNATURE_INVALID": "Voucher signature does not match its payload",
        "ALREADY_VOUCHED": "Customer already vouched for this location",
        "POP_TOKEN_INVALID": "Invalid or missing POP token",
        "REVIEW_EXISTS": "A review was already submitted for this vouch",
        "MISSING_FIELD": "Missing required field",
        "INVALID_RATING": "Rating must be between 1 and 5",
        "SIGNING_FAILED": "Voucher signing failed",
        "STORE_FAILED": "Data store operation failed",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class NotFound(VouchmanError):
    """No matching attempt, location or voucher."""

    status_code = 404


class Conflict(VouchmanError):
    """Already redeemed, already vouched, duplicate review."""

    status_code = 409


class Forbidden(VouchmanError):
    """Cross-business access or unproven presence."""

    status_code = 403


class InvalidState(VouchmanError):
    """Voucher in a status (or shape) that cannot be redeemed."""

    status_code = 400


class InvalidRequest(VouchmanError):
    """Malformed caller input."""

    status_code = 400


class UpstreamFailure(VouchmanError):
    """Store or signer error. Safe for the caller to retry."""

    status_code = 500

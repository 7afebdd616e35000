"""Error codes returned by the garden endpoints.

Every failure is a fixed string code with an HTTP status. The code is the
whole response body, so controllers and apps can match on it directly.
"""


class GardenAuthError(Exception):
    code: str = "error"
    status_code: int = 400

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)


# --- 400: malformed or missing input ---

class MissingParameter(GardenAuthError):
    code = "missing_parameter"


class InvalidSerial(GardenAuthError):
    code = "invalid_serial"


class TokenVerificationError(GardenAuthError):
    code = "invalid_token"


class StorageError(GardenAuthError):
    """Database fault during claim/release.

    Reported as invalid_token so existing clients see the same code as before.
    """

    code = "invalid_token"


# --- 401: failed credential check ---

class WrongKey(GardenAuthError):
    code = "wrong_key"
    status_code = 401


class WrongPassword(GardenAuthError):
    code = "wrong_password"
    status_code = 401


# --- 403: policy denial ---

class TooManyGardens(GardenAuthError):
    code = "too_many_gardens"
    status_code = 403


class GardenNicknameConflict(GardenAuthError):
    code = "garden_nickname_conflict"
    status_code = 403


class GardenAlreadyClaimed(GardenAuthError):
    code = "garden_already_claimed"
    status_code = 403


class GardenNotClaimed(GardenAuthError):
    code = "garden_not_claimed"
    status_code = 403


# --- 404: missing resource ---

class GardenNotFound(GardenAuthError):
    code = "invalid_serial"
    status_code = 404

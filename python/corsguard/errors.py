"""Error definitions.

Two kinds of failure exist:
- Denials: a request violates the CORS policy. These are ordinary outcomes,
  returned by the engine as values and never raised.
- Configuration errors: a policy cannot be built from the given input.
  These are raised once, at startup.

The example service additionally maps HTTP failures to API error codes.
"""

from enum import Enum


class DenialReason(str, Enum):
    """Why a cross-origin request was refused.

    Recorded in logs only; clients always receive the same bare 403.
    """

    DISALLOWED_ORIGIN = "disallowed_origin"
    DISALLOWED_METHOD = "disallowed_method"
    DISALLOWED_HEADER = "disallowed_header"


class PolicyConfigError(ValueError):
    """Raised when a CORS policy is built from invalid input.

    Attributes:
        field: The policy field that was rejected (e.g. "allowed_methods")
        message: Human-readable error message
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ApiErrorCode(str, Enum):
    """Error codes used in the example service's JSON error envelope."""

    # Authorization errors (403)
    E_FORBIDDEN = "E_FORBIDDEN"

    # Not found errors (404)
    E_NOT_FOUND = "E_NOT_FOUND"

    # Validation errors (400)
    E_INVALID_REQUEST = "E_INVALID_REQUEST"

    # Server errors
    E_INTERNAL = "E_INTERNAL"  # 500


STATUS_TO_ERROR_CODE: dict[int, ApiErrorCode] = {
    400: ApiErrorCode.E_INVALID_REQUEST,
    403: ApiErrorCode.E_FORBIDDEN,
    404: ApiErrorCode.E_NOT_FOUND,
    405: ApiErrorCode.E_INVALID_REQUEST,
    422: ApiErrorCode.E_INVALID_REQUEST,
}

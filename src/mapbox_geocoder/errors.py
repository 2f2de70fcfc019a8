# Project: mapbox-geocoder
# Owner: GreenUnicorn
"""
errors.py — Error kinds delivered to geocoding completion handlers.

The geocoder never raises these from its public calls. They arrive in the
second slot of the completion handler: handler(None, error).
"""

from enum import IntEnum


ERROR_DOMAIN = "MBGeocoderErrorDomain"


class ErrorCode(IntEnum):
    CONNECTION_ERROR = -1000
    HTTP_ERROR = -1001
    PARSE_ERROR = -1002


class GeocoderError(Exception):
    """Base class for all geocoding failures.

    Attributes:
        domain: Constant error domain string shared by all geocoder errors.
        code: One of ErrorCode.
        user_info: Extra details about the failure (URL, status, messages).
    """

    domain = ERROR_DOMAIN
    code: ErrorCode

    def __init__(self, message: str, user_info: dict | None = None):
        super().__init__(message)
        self.message = message
        self.user_info = dict(user_info or {})


class GeocoderConnectionError(GeocoderError):
    """The transport failed before a response arrived (DNS, TCP, TLS, timeout)."""

    code = ErrorCode.CONNECTION_ERROR

    def __init__(self, underlying: Exception, url: str | None = None):
        user_info = {"underlying_error": str(underlying)}
        if url is not None:
            user_info["url"] = url
        super().__init__(f"Connection failed: {underlying}", user_info)
        self.underlying = underlying


class GeocoderHTTPError(GeocoderError):
    """A response arrived but its status code was not 200."""

    code = ErrorCode.HTTP_ERROR

    def __init__(self, status_code: int):
        super().__init__(
            f"Received HTTP status code {status_code}",
            {"status_code": status_code},
        )
        self.status_code = status_code


class GeocoderParseError(GeocoderError):
    """The response body was not valid JSON or not a JSON object."""

    code = ErrorCode.PARSE_ERROR

    def __init__(self, message: str = "Unable to parse results"):
        super().__init__(message)

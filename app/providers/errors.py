"""Errors raised at the payment gateway boundary."""

from typing import Any, Optional


class PhonePeError(Exception):
    """
    Failure reported by the payment gateway.

    Carries the gateway's error code and, when the failure came from an HTTP
    response, its status code. Anything else that goes wrong while talking to
    the gateway (network faults, malformed input) is left as a plain exception.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        http_status_code: Optional[int] = None,
        data: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status_code = http_status_code
        self.data = data

    def __repr__(self) -> str:
        return (
            f"PhonePeError(message={self.message!r}, code={self.code!r}, "
            f"http_status_code={self.http_status_code!r})"
        )

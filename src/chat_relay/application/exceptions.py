from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class ValidationError(AppError):
    pass


class PayloadTooLargeError(AppError):
    pass


class RelayError(AppError):
    """The outbound call to the processor did not produce a usable reply."""


class RelayTimeoutError(RelayError):
    pass


class RelayFailureError(RelayError):
    pass


class ReplyDecodeError(AppError):
    pass


class CallbackDecodeError(AppError):
    pass

"""Error kinds raised by the conversion pipeline."""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failures a conversion or command can end with."""

    INVALID_TYPE = "invalid_type"
    TOO_LARGE = "too_large"
    EXPIRED = "expired"
    PLACEMENT_PARSE = "placement_parse"
    TRANSFORM_FAILURE = "transform_failure"
    RETRIEVAL_FAILURE = "retrieval_failure"


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_TYPE: "unknown file type",
    ErrorKind.TOO_LARGE: "file too large",
    ErrorKind.EXPIRED: "request expired",
    ErrorKind.PLACEMENT_PARSE: "unknown placement",
    ErrorKind.TRANSFORM_FAILURE: "image could not be converted",
    ErrorKind.RETRIEVAL_FAILURE: "file could not be downloaded",
}


class ConversionError(Exception):
    """Failure tagged with an ErrorKind and a human-readable message."""

    def __init__(self, kind: ErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        message = _MESSAGES[kind]
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

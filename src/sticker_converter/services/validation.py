"""Acceptance rules for incoming image submissions."""

from datetime import UTC, datetime, timedelta

from sticker_converter.domain.errors import ConversionError, ErrorKind
from sticker_converter.domain.stickers import (
    FRESHNESS_WINDOW_SECONDS,
    MAX_FILE_SIZE_BYTES,
    ImageSubmission,
)

_FRESHNESS_WINDOW = timedelta(seconds=FRESHNESS_WINDOW_SECONDS)


def validate_submission(
    submission: ImageSubmission, now: datetime | None = None
) -> None:
    """Raise ConversionError when the submission cannot be converted."""
    if not submission.mime_type.startswith("image/"):
        raise ConversionError(ErrorKind.INVALID_TYPE, submission.mime_type or None)
    if submission.byte_size > MAX_FILE_SIZE_BYTES:
        raise ConversionError(ErrorKind.TOO_LARGE, f"{submission.byte_size} bytes")
    current = now or datetime.now(tz=UTC)
    if current - submission.received_at >= _FRESHNESS_WINDOW:
        raise ConversionError(ErrorKind.EXPIRED)

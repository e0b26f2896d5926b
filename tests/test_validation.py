"""Tests for submission validation."""

from datetime import timedelta

import pytest

from sticker_converter.domain.errors import ConversionError, ErrorKind
from sticker_converter.services.validation import validate_submission
from tests.conftest import NOW, make_submission


def test_accepts_fresh_small_image() -> None:
    validate_submission(make_submission(), now=NOW)


def test_rejects_non_image_mime_type() -> None:
    with pytest.raises(ConversionError) as excinfo:
        validate_submission(make_submission(mime_type="application/pdf"), now=NOW)

    assert excinfo.value.kind is ErrorKind.INVALID_TYPE
    assert "unknown file type" in str(excinfo.value)


def test_size_limit_is_inclusive() -> None:
    validate_submission(make_submission(byte_size=2_097_152), now=NOW)

    with pytest.raises(ConversionError) as excinfo:
        validate_submission(make_submission(byte_size=2_097_153), now=NOW)

    assert excinfo.value.kind is ErrorKind.TOO_LARGE


def test_type_is_checked_before_size() -> None:
    submission = make_submission(mime_type="video/mp4", byte_size=10_000_000)

    with pytest.raises(ConversionError) as excinfo:
        validate_submission(submission, now=NOW)

    assert excinfo.value.kind is ErrorKind.INVALID_TYPE


@pytest.mark.parametrize("age_seconds", [0, 30, 59])
def test_fresh_submissions_pass(age_seconds: int) -> None:
    validate_submission(make_submission(), now=NOW + timedelta(seconds=age_seconds))


@pytest.mark.parametrize("age_seconds", [60, 61, 3600])
def test_stale_submissions_expire(age_seconds: int) -> None:
    with pytest.raises(ConversionError) as excinfo:
        validate_submission(
            make_submission(), now=NOW + timedelta(seconds=age_seconds)
        )

    assert excinfo.value.kind is ErrorKind.EXPIRED

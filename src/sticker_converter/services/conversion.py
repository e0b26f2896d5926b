"""Conversion pipeline for fresh and resumed submissions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from sticker_converter.adapters.telegram_file_client import (
    TelegramFileClient,
    TelegramFileError,
)
from sticker_converter.domain.errors import ConversionError, ErrorKind
from sticker_converter.domain.stickers import (
    ImageDimensions,
    ImageSubmission,
    LayoutSignal,
    Placement,
    ResizeSpec,
    SessionState,
    StickerDocument,
)
from sticker_converter.services.layout import resolve_layout
from sticker_converter.services.sessions import SessionService
from sticker_converter.services.validation import validate_submission

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "sticker.png"


class ImageTransformer(Protocol):
    """Interface for the decode/resize/encode primitive."""

    async def read_dimensions(self, source: bytes) -> ImageDimensions:
        """Return the pixel size of an encoded image."""

    async def transform(self, source: bytes, spec: ResizeSpec) -> bytes:
        """Return PNG bytes for the image resized per spec."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def output_file_name(file_name: str | None) -> str:
    """Return the original basename with a .png extension."""
    if not file_name:
        return DEFAULT_FILE_NAME
    stem = Path(file_name).stem
    return f"{stem}.png" if stem else DEFAULT_FILE_NAME


@dataclass
class ConversionService:
    """Run submissions through validation, layout and transformation."""

    file_client: TelegramFileClient
    transformer: ImageTransformer
    session_service: SessionService
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def submit(
        self, user_id: int, submission: ImageSubmission
    ) -> StickerDocument | None:
        """Convert a fresh submission.

        Returns None when the image was parked waiting for a placement.
        Failures raise ConversionError and leave the session untouched.
        """
        state = self.session_service.load(user_id)
        result = await self._convert(submission, state.stored_placement)
        if result is LayoutSignal.NEEDS_PLACEMENT:
            self.session_service.park(user_id, submission)
            logger.info(
                "Parked submission awaiting placement",
                extra={"user_id": user_id, "file_id": submission.file_id},
            )
            return None
        return result

    async def resume(
        self, user_id: int, state: SessionState
    ) -> tuple[SessionState, StickerDocument | None]:
        """Retry the pending submission with the stored placement.

        A failed retry is logged and keeps the submission pending.
        """
        submission = state.pending_request
        if submission is None:
            return state, None
        machine = self.session_service.machine
        try:
            result = await self._convert(submission, state.stored_placement)
        except ConversionError as exc:
            logger.warning(
                "Resumed conversion failed: %s",
                exc,
                extra={"user_id": user_id, "file_id": submission.file_id},
            )
            return machine.retain(state), None
        if not isinstance(result, StickerDocument):
            return machine.retain(state), None
        resolved = machine.resolve(state)
        self.session_service.save(user_id, resolved)
        return resolved, result

    async def _convert(
        self, submission: ImageSubmission, placement: Placement | None
    ) -> StickerDocument | LayoutSignal:
        validate_submission(submission, now=self.clock())
        try:
            source = await self.file_client.download_file_bytes(submission.file_id)
        except TelegramFileError as exc:
            logger.warning(
                "Failed to download Telegram file: %s",
                exc,
                extra={"file_id": submission.file_id},
            )
            raise ConversionError(ErrorKind.RETRIEVAL_FAILURE, str(exc)) from exc
        except Exception as exc:
            logger.exception(
                "Failed to download Telegram file",
                extra={"file_id": submission.file_id},
            )
            raise ConversionError(ErrorKind.RETRIEVAL_FAILURE) from exc
        dimensions = await self.transformer.read_dimensions(source)
        spec = resolve_layout(dimensions, placement)
        if isinstance(spec, LayoutSignal):
            return spec
        content = await self.transformer.transform(source, spec)
        return StickerDocument(
            file_name=output_file_name(submission.file_name), content=content
        )

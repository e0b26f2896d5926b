"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request

from sticker_converter.api.telegram_models import (
    TelegramDocument,
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
)
from sticker_converter.app_logging import configure_logging
from sticker_converter.containers import AppContainer
from sticker_converter.domain.errors import ConversionError
from sticker_converter.domain.stickers import ImageSubmission, Placement
from sticker_converter.services.commands import (
    extract_command_argument,
    is_placement_command,
    placement_token,
)
from sticker_converter.telegram_commands import CHAT_MENU_BUTTON, telegram_commands

PHOTO_MIME_TYPE = "image/jpeg"
PHOTO_FILE_NAME = "photo.jpg"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        message = update.message
        if message is None:
            return {"status": "ok"}

        user_id = message.from_user.id
        chat_id = message.chat.id
        text = message.text or ""

        if text.startswith("/start"):
            await state_container.start_command_handler.handle(chat_id)
            return {"status": "ok"}

        if text.startswith("/help"):
            await state_container.help_command_handler.handle(chat_id)
            return {"status": "ok"}

        if is_placement_command(text):
            async with state_container.session_service.locked(user_id):
                await _handle_placement(state_container, message, text)
            return {"status": "ok"}

        submission = _submission_from_message(message)
        if submission is None:
            return {"status": "ok"}

        async with state_container.session_service.locked(user_id):
            try:
                document = await state_container.conversion_service.submit(
                    user_id, submission
                )
            except ConversionError as exc:
                logger.info(
                    "Conversion rejected: %s",
                    exc,
                    extra={"user_id": user_id, "kind": exc.kind.value},
                )
                await state_container.telegram_client.send_message(
                    chat_id=chat_id,
                    text=_format_apology(exc),
                    reply_to_message_id=message.message_id,
                )
                return {"status": "ok"}
            except Exception as exc:
                logger.exception(
                    "Conversion failed", extra={"file_id": submission.file_id}
                )
                await state_container.telegram_client.send_message(
                    chat_id=chat_id,
                    text=_format_apology(exc, state_container),
                    reply_to_message_id=message.message_id,
                )
                return {"status": "ok"}

        if document is None:
            await state_container.telegram_client.send_message(
                chat_id=chat_id,
                text=_format_placement_prompt(),
                reply_to_message_id=message.message_id,
            )
            return {"status": "ok"}

        await state_container.telegram_client.send_document(
            chat_id=chat_id,
            file_name=document.file_name,
            content=document.content,
            reply_to_message_id=message.message_id,
        )
        return {"status": "ok"}

    return app


async def _handle_placement(
    state_container: AppContainer, message: TelegramMessage, text: str
) -> None:
    chat_id = message.chat.id
    argument = extract_command_argument(text)
    try:
        outcome = await state_container.placement_command_handler.handle(
            argument, message.from_user.id
        )
    except ConversionError as exc:
        await state_container.telegram_client.send_message(
            chat_id=chat_id, text=_format_placement_help(exc)
        )
        return
    await state_container.telegram_client.send_message(
        chat_id=chat_id, text=_format_placement_confirmation(outcome.placement)
    )
    if outcome.document is not None:
        await state_container.telegram_client.send_document(
            chat_id=chat_id,
            file_name=outcome.document.file_name,
            content=outcome.document.content,
        )


def _submission_from_message(message: TelegramMessage) -> ImageSubmission | None:
    """Build a submission from a document or photo message, if present."""
    received_at = datetime.fromtimestamp(message.date, tz=UTC)
    if message.document:
        return _submission_from_document(message.document, received_at)
    if message.photo:
        photo = _select_largest_photo(message.photo)
        return ImageSubmission(
            file_id=photo.file_id,
            mime_type=PHOTO_MIME_TYPE,
            byte_size=photo.file_size or 0,
            file_name=PHOTO_FILE_NAME,
            received_at=received_at,
        )
    return None


def _submission_from_document(
    document: TelegramDocument, received_at: datetime
) -> ImageSubmission:
    return ImageSubmission(
        file_id=document.file_id,
        mime_type=document.mime_type or "",
        byte_size=document.file_size or 0,
        file_name=document.file_name,
        received_at=received_at,
    )


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def _format_apology(
    exc: Exception, state_container: AppContainer | None = None
) -> str:
    """Return the user-facing apology including the failure cause.

    Only ConversionError messages are shown verbatim; anything else is
    reduced to a generic cause outside the local environment.
    """
    if isinstance(exc, ConversionError):
        cause = str(exc)
    else:
        cause = "internal error"
        if state_container and state_container.settings.environment == "local":
            cause = f"{cause} (debug: {type(exc).__name__}: {exc})"
    return f"Sorry but we cannot convert the file at this time: {cause}"


def _format_placement_prompt() -> str:
    return (
        "This image is small, so it will be padded onto a 512px wide strip.\n"
        "Where should it sit? Reply with one of:\n"
        "/setplacement centre\n"
        "/setplacement left"
    )


def _format_placement_confirmation(placement: Placement) -> str:
    return f"Placement set to {placement_token(placement)}."


def _format_placement_help(exc: ConversionError) -> str:
    return (
        f"Sorry, {exc}. "
        "Use /setplacement centre or /setplacement left, or see /help."
    )

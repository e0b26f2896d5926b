"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from sticker_converter.adapters.pillow_image_transformer import (
    PillowImageTransformer,
)
from sticker_converter.adapters.supabase_session_store import SupabaseSessionStore
from sticker_converter.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from sticker_converter.adapters.telegram_file_client import HttpxTelegramFileClient
from sticker_converter.config import Settings
from sticker_converter.services.commands import (
    HelpCommandHandler,
    PlacementCommandHandler,
    StartCommandHandler,
)
from sticker_converter.services.conversion import ConversionService
from sticker_converter.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    session_service: SessionService
    conversion_service: ConversionService
    start_command_handler: StartCommandHandler
    help_command_handler: HelpCommandHandler
    placement_command_handler: PlacementCommandHandler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_service = SessionService(SupabaseSessionStore(supabase_client))
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    telegram_file_client = HttpxTelegramFileClient.create(
        resolved_settings.telegram_bot_token
    )
    conversion_service = ConversionService(
        file_client=telegram_file_client,
        transformer=PillowImageTransformer(),
        session_service=session_service,
    )

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        session_service=session_service,
        conversion_service=conversion_service,
        start_command_handler=StartCommandHandler(telegram_client),
        help_command_handler=HelpCommandHandler(telegram_client),
        placement_command_handler=PlacementCommandHandler(
            session_service=session_service,
            conversion_service=conversion_service,
        ),
        close_resources=close_resources,
    )

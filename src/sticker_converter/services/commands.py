"""Command handlers for Telegram updates."""

from dataclasses import dataclass

from sticker_converter.adapters.telegram_client import TelegramClient
from sticker_converter.domain.errors import ConversionError, ErrorKind
from sticker_converter.domain.stickers import Placement, SessionState, StickerDocument
from sticker_converter.services.conversion import ConversionService
from sticker_converter.services.sessions import SessionService

PLACEMENT_TOKENS: dict[str, Placement] = {
    "centre": Placement.CENTER,
    "left": Placement.LEFT,
}

PLACEMENT_COMMAND = "/setplacement"

WELCOME_TEXT = (
    "Welcome! Send me an image as a file and I will convert it "
    "into a PNG sticker for @Stickers."
)

HELP_TEXT = (
    "Send me an image as a file and I will convert it into the format "
    "required by @Stickers.\n\n"
    "Large images (wider than 384px or taller than 256px) fit in a "
    "512x512 box.\n"
    "Smaller images are padded with transparency onto a 512x256 strip, "
    "or 512x128 when they are at most 128px tall.\n\n"
    "Choose where small images sit on the strip:\n"
    "/setplacement centre - place the sticker in the middle\n"
    "/setplacement left - place the sticker on the left"
)


def parse_placement(raw_argument: str) -> Placement:
    """Map a command argument to a Placement."""
    token = raw_argument.strip().lower()
    placement = PLACEMENT_TOKENS.get(token)
    if placement is None:
        raise ConversionError(ErrorKind.PLACEMENT_PARSE, raw_argument.strip() or None)
    return placement


def placement_token(placement: Placement) -> str:
    """Return the command token that selects a placement."""
    for token, value in PLACEMENT_TOKENS.items():
        if value is placement:
            return token
    return placement.value


def is_placement_command(text: str) -> bool:
    """Return True for /setplacement, with or without a bot mention."""
    parts = text.split()
    if not parts:
        return False
    command = parts[0].split("@", maxsplit=1)[0]
    return command == PLACEMENT_COMMAND


def extract_command_argument(text: str) -> str:
    """Return the first whitespace-separated argument of a command."""
    parts = text.split()
    return parts[1] if len(parts) > 1 else ""


@dataclass(frozen=True)
class PlacementOutcome:
    """Result of a placement command."""

    session: SessionState
    placement: Placement
    document: StickerDocument | None = None


@dataclass
class PlacementCommandHandler:
    """Handle /setplacement and resume any parked image."""

    session_service: SessionService
    conversion_service: ConversionService

    async def handle(self, raw_argument: str, user_id: int) -> PlacementOutcome:
        """Store the placement and retry the pending submission, if any.

        An unknown token raises ConversionError before the session is touched.
        """
        placement = parse_placement(raw_argument)
        state = self.session_service.set_placement(user_id, placement)
        if state.pending_request is None:
            return PlacementOutcome(session=state, placement=placement)
        state, document = await self.conversion_service.resume(user_id, state)
        return PlacementOutcome(session=state, placement=placement, document=document)


@dataclass
class StartCommandHandler:
    """Handle the /start Telegram command."""

    telegram_client: TelegramClient

    async def handle(self, chat_id: int) -> None:
        """Send a welcome message."""
        await self.telegram_client.send_message(chat_id=chat_id, text=WELCOME_TEXT)


@dataclass
class HelpCommandHandler:
    """Handle the /help Telegram command."""

    telegram_client: TelegramClient

    async def handle(self, chat_id: int) -> None:
        """Send usage instructions."""
        await self.telegram_client.send_message(chat_id=chat_id, text=HELP_TEXT)

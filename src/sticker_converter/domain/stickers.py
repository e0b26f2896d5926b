"""Domain models for sticker conversion."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

MAX_FILE_SIZE_BYTES = 2 * 1024 * 1024
FRESHNESS_WINDOW_SECONDS = 60

CANVAS_WIDTH = 512
LARGE_CANVAS_HEIGHT = 512
MEDIUM_CANVAS_HEIGHT = 256
SMALL_CANVAS_HEIGHT = 128

LARGE_WIDTH_THRESHOLD = 384
LARGE_HEIGHT_THRESHOLD = 256
SMALL_HEIGHT_THRESHOLD = 128

TRANSPARENT: tuple[int, int, int, int] = (0, 0, 0, 0)


class Placement(Enum):
    """Horizontal anchor used when padding a small image."""

    CENTER = "center"
    LEFT = "left"


class FitMode(Enum):
    """How an image is scaled into its target canvas."""

    INSIDE = "inside"
    CONTAIN = "contain"


class PendingStatus(Enum):
    """States of the pending-request state machine."""

    NONE = "NONE"
    AWAITING_PLACEMENT = "AWAITING_PLACEMENT"
    RESOLVED = "RESOLVED"


@dataclass(frozen=True)
class ImageSubmission:
    """A user-submitted file awaiting conversion."""

    file_id: str
    mime_type: str
    byte_size: int
    file_name: str | None
    received_at: datetime


@dataclass(frozen=True)
class ImageDimensions:
    """Pixel size of a decoded image."""

    width: int
    height: int


@dataclass(frozen=True)
class ResizeSpec:
    """Resolved canvas and scaling instructions for one conversion."""

    target_width: int
    target_height: int
    fit_mode: FitMode
    anchor: Placement | None = None
    background: tuple[int, int, int, int] = TRANSPARENT


class LayoutSignal(Enum):
    """Non-error outcomes of layout resolution."""

    NEEDS_PLACEMENT = "needs_placement"


NEEDS_PLACEMENT = LayoutSignal.NEEDS_PLACEMENT


@dataclass(frozen=True)
class SessionState:
    """Per-user conversion state."""

    stored_placement: Placement | None = None
    pending_request: ImageSubmission | None = None
    status: PendingStatus = PendingStatus.NONE


@dataclass(frozen=True)
class StickerDocument:
    """A converted PNG ready to be sent back to the chat."""

    file_name: str
    content: bytes

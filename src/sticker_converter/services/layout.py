"""Canvas layout selection based on image size."""

from sticker_converter.domain.stickers import (
    CANVAS_WIDTH,
    LARGE_CANVAS_HEIGHT,
    LARGE_HEIGHT_THRESHOLD,
    LARGE_WIDTH_THRESHOLD,
    MEDIUM_CANVAS_HEIGHT,
    NEEDS_PLACEMENT,
    SMALL_CANVAS_HEIGHT,
    SMALL_HEIGHT_THRESHOLD,
    FitMode,
    ImageDimensions,
    LayoutSignal,
    Placement,
    ResizeSpec,
)


def is_large(dimensions: ImageDimensions) -> bool:
    """Return True when the image is scaled into the square canvas."""
    return (
        dimensions.width > LARGE_WIDTH_THRESHOLD
        or dimensions.height > LARGE_HEIGHT_THRESHOLD
    )


def resolve_layout(
    dimensions: ImageDimensions, placement: Placement | None = None
) -> ResizeSpec | LayoutSignal:
    """Map image dimensions to a resize spec, or ask for a placement.

    Large images always fit inside a 512x512 box. Small images are padded
    onto a 512-wide strip, 256 tall when the source is taller than 128 and
    128 otherwise, and need a placement to anchor them horizontally.
    """
    if is_large(dimensions):
        return ResizeSpec(
            target_width=CANVAS_WIDTH,
            target_height=LARGE_CANVAS_HEIGHT,
            fit_mode=FitMode.INSIDE,
        )
    if placement is None:
        return NEEDS_PLACEMENT
    target_height = (
        MEDIUM_CANVAS_HEIGHT
        if dimensions.height > SMALL_HEIGHT_THRESHOLD
        else SMALL_CANVAS_HEIGHT
    )
    return ResizeSpec(
        target_width=CANVAS_WIDTH,
        target_height=target_height,
        fit_mode=FitMode.CONTAIN,
        anchor=placement,
    )

"""Tests for container wiring."""

import asyncio

from sticker_converter.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.conversion_service is not None
    assert (
        container.placement_command_handler.session_service
        is container.session_service
    )
    asyncio.run(container.close_resources())

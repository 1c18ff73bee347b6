"""Shared pytest configuration."""

import os

# Headless SDL so pygame can initialize without a display or audio device
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> None:
    """Initialize pygame once for the test session."""
    if not pygame.get_init():
        pygame.init()

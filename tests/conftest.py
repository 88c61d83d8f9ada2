"""Shared fixtures: headless pygame and fake collaborators."""

from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from .fakes import FakeEngine, FakeSurface


@pytest.fixture(scope="session", autouse=True)
def pygame_display():
    pygame.display.init()
    yield
    pygame.quit()


@pytest.fixture()
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture()
def fake_surface() -> FakeSurface:
    return FakeSurface()

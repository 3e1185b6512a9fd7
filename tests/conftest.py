"""
Pytest configuration and shared fixtures for the atlas editor tests.
"""

import random

import pytest
from PySide6.QtCore import QCoreApplication

from atlas_plotter.command_manager import CommandManager
from atlas_plotter.events import EditorEvents
from atlas_plotter.settings import EditorSettings
from atlas_plotter.session import EditorSession
from atlas_plotter.sprite_collection import SpriteItemCollection
from atlas_plotter.sprite_data import Collider, PointOffset, RectSource, SpriteItem


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """Signals are delivered synchronously, but Qt still wants an application object."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def collection():
    """An empty collection with reproducible marker colors."""
    return SpriteItemCollection(rng=random.Random(1234))


@pytest.fixture
def manager():
    return CommandManager()


@pytest.fixture
def events():
    return EditorEvents()


@pytest.fixture
def session():
    """A session that starts without the seeded default sprite."""
    return EditorSession(EditorSettings(seed_default_sprite=False))


@pytest.fixture
def make_sprite():
    def _make(sprite_id: int, name: str | None = None) -> SpriteItem:
        return SpriteItem(
            id=sprite_id,
            name=name or f"sprite_{sprite_id}",
            y_sort=1,
            offset=PointOffset(1, 2),
            source=RectSource(5, 6, 16, 16),
            colliders=[Collider("rectangle", 0, 0, 4, 4)],
        )

    return _make


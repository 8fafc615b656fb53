from __future__ import annotations

import pytest

from sedetok_live.core.game_manager import GameManager
from tests.fakes import FakeScheduler, make_drafts


@pytest.fixture
def manager() -> GameManager:
    return GameManager()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def game(manager):
    return manager.create_game("Capitales", make_drafts())

"""Local player window: join screen followed by the play screen."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QMainWindow, QStackedWidget

from sedetok_live.constants.ui_constants import ERROR_JOIN_FAILED, PLAYER_WINDOW_TITLE
from sedetok_live.core.backend import GameBackend
from sedetok_live.core.errors import LiveGameError
from sedetok_live.core.models import LiveGame, LiveGamePlayer
from sedetok_live.core.services.gameplay import GameplaySession
from sedetok_live.core.services.join_flow import JoinFlow
from sedetok_live.styling.styles import Styles
from sedetok_live.ui.components.join_panel import JoinPanel
from sedetok_live.ui.components.play_panel import PlayPanel
from sedetok_live.ui.dialog_helpers import show_error
from sedetok_live.ui.qt_scheduler import QtScheduler

logger = logging.getLogger(__name__)


class PlayerWindow(QMainWindow):
    """One player's device, simulated as a window next to the host console."""

    def __init__(self, backend: GameBackend, initial_pin: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(PLAYER_WINDOW_TITLE)
        self.setStyleSheet(Styles.get_main_window_style())
        self.resize(520, 640)
        self.setAttribute(Qt.WA_DeleteOnClose)

        self.backend = backend
        self.scheduler = QtScheduler(self)
        self.session: GameplaySession | None = None
        self.join_flow = JoinFlow(
            backend,
            self.scheduler,
            on_enter_game=self._enter_game,
            on_change=self._render_join,
        )

        self.stack = QStackedWidget(self)
        self.join_panel = JoinPanel(self.join_flow, self)
        self.play_panel = PlayPanel(self)
        self.stack.addWidget(self.join_panel)
        self.stack.addWidget(self.play_panel)
        self.setCentralWidget(self.stack)

        if initial_pin:
            self.join_panel.pin_input.setText(self.join_flow.set_pin(initial_pin))
        self.join_panel.render(self.join_flow)

    def _render_join(self, flow: JoinFlow) -> None:
        self.join_panel.render(flow)

    def _enter_game(self, game: LiveGame, player: LiveGamePlayer) -> None:
        self.setWindowTitle(f"{PLAYER_WINDOW_TITLE} - {player.player_name}")
        self.session = GameplaySession(
            self.backend,
            self.scheduler,
            game_id=game.id,
            player_id=player.id,
            on_change=self.play_panel.render,
        )
        self.play_panel.attach(self.session)
        self.stack.setCurrentWidget(self.play_panel)
        try:
            self.session.start()
        except LiveGameError as exc:
            logger.warning("Could not load game %s: %s", game.id, exc)
            self.session = None
            self.stack.setCurrentWidget(self.join_panel)
            self.setWindowTitle(PLAYER_WINDOW_TITLE)
            self.join_flow.return_to_form(ERROR_JOIN_FAILED)
            show_error(self, "Error", str(exc))

    def closeEvent(self, event) -> None:
        self.join_flow.close()
        if self.session is not None:
            self.session.close()
        logger.debug("Player window closed")
        super().closeEvent(event)

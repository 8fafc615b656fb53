"""Component for the host's lobby: PIN display and joined players."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from sedetok_live.constants.ui_constants import (
    HOST_BUTTON_START,
    LOBBY_COUNT_TEMPLATE,
    LOBBY_DESCRIPTION,
    LOBBY_EMPTY_STATE,
    LOBBY_PIN_TEMPLATE,
    NO_PLAYERS_MESSAGE,
)
from sedetok_live.core.errors import LiveGameError
from sedetok_live.core.game_manager import GameManager
from sedetok_live.styling.styles import Styles
from sedetok_live.ui.dialog_helpers import show_warning


class LobbyPanel(QWidget):
    """UI component listing the players waiting for the host to start."""

    def __init__(
        self,
        game_manager: GameManager,
        player_url: str,
        on_start_game: callable,
        parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.game_manager = game_manager
        self.player_url = player_url
        self.on_start_game = on_start_game
        self.game_id: str | None = None
        self._lobby_snapshot_ids: list[str] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.description_label = QLabel(LOBBY_DESCRIPTION, self)
        self.description_label.setWordWrap(True)
        layout.addWidget(self.description_label)

        self.pin_label = QLabel("", self)
        self.pin_label.setAlignment(Qt.AlignCenter)
        self.pin_label.setStyleSheet(Styles.get_pin_style())
        layout.addWidget(self.pin_label)

        self.network_label = QLabel(f"API: {self.player_url}", self)
        self.network_label.setWordWrap(True)
        layout.addWidget(self.network_label)

        self.count_label = QLabel(LOBBY_COUNT_TEMPLATE.format(count=0), self)
        self.count_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.count_label)

        self.player_list = QListWidget(self)
        self.player_list.setAlternatingRowColors(True)
        layout.addWidget(self.player_list, stretch=1)

        self.empty_label = QLabel(LOBBY_EMPTY_STATE, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

        self.start_button = QPushButton(HOST_BUTTON_START, self)
        self.start_button.clicked.connect(self._handle_start_click)
        layout.addWidget(self.start_button)

    def show_game(self, game_id: str, title: str, pin: str) -> None:
        self.game_id = game_id
        self._lobby_snapshot_ids = []
        self.player_list.clear()
        self.description_label.setText(f"{title}\n{LOBBY_DESCRIPTION}")
        self.pin_label.setText(LOBBY_PIN_TEMPLATE.format(pin=pin))
        self.count_label.setText(LOBBY_COUNT_TEMPLATE.format(count=0))
        self.empty_label.setVisible(True)
        self.refresh_players()

    def _handle_start_click(self) -> None:
        if self.player_list.count() == 0:
            show_warning(self, "Sin jugadores", NO_PLAYERS_MESSAGE)
            return
        self.on_start_game()

    def refresh_players(self) -> None:
        if self.game_id is None:
            return
        try:
            players = self.game_manager.list_players(self.game_id)
        except LiveGameError:
            return
        snapshot = [player.id for player in players]
        if snapshot == self._lobby_snapshot_ids:
            return
        self._lobby_snapshot_ids = snapshot
        self.player_list.clear()
        for player in players:
            timestamp = player.joined_at.strftime("%H:%M:%S")
            QListWidgetItem(f"{player.player_name} ({timestamp})", self.player_list)
        count = len(players)
        self.count_label.setText(LOBBY_COUNT_TEMPLATE.format(count=count))
        self.empty_label.setVisible(count == 0)

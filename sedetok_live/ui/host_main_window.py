"""Qt main window for the host: import, lobby, live game and results."""

from __future__ import annotations

from enum import Enum, auto
import logging
from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from sedetok_live.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from sedetok_live.constants.ui_constants import (
    GAME_CREATED_MESSAGE,
    GAME_FINISHED_MESSAGE,
    GAME_REPLAYED_MESSAGE,
    GAME_STARTED_MESSAGE,
    HOST_BUTTON_CREATE,
    HOST_BUTTON_IMPORT,
    HOST_BUTTON_OPEN_PLAYER,
    HOST_BUTTON_REPLAY,
    HOST_WINDOW_TITLE,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    LOBBY_REFRESH_INTERVAL_MS,
    NO_QUESTIONS_MESSAGE,
    PLAYER_URL_PLACEHOLDER,
)
from sedetok_live.core.errors import LiveGameError, QuestionImportError
from sedetok_live.core.game_manager import GameManager
from sedetok_live.core.models import GameStatus, LiveGame
from sedetok_live.core.question_importer import ImportedQuestionSet, load_questions_from_file
from sedetok_live.styling.styles import Styles
from sedetok_live.ui.components.live_panel import LivePanel
from sedetok_live.ui.components.lobby_panel import LobbyPanel
from sedetok_live.ui.dialog_helpers import (
    confirm_finish_game,
    confirm_replace_questions,
    show_error,
    show_info,
    show_warning,
)
from sedetok_live.ui.player_window import PlayerWindow

logger = logging.getLogger(__name__)


class HostMode(Enum):
    """High-level UI mode for the host console."""

    SETUP = auto()
    LOBBY = auto()
    LIVE = auto()


class HostMainWindow(QMainWindow):
    """Main Qt window orchestrating setup, lobby and live modes."""

    def __init__(self, game_manager: GameManager, player_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(HOST_WINDOW_TITLE)

        self.game_manager = game_manager
        self.player_url = player_url or PLAYER_URL_PLACEHOLDER

        self._mode = HostMode.SETUP
        self._imported: ImportedQuestionSet | None = None
        self._game: LiveGame | None = None
        self._player_windows: list[PlayerWindow] = []

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())
        self._auto_load_default_questions()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_action_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)

        self.setup_label = QLabel(NO_QUESTIONS_MESSAGE, self)
        self.setup_label.setWordWrap(True)
        self.setup_label.setStyleSheet(Styles.get_large_label_style())
        self.lobby_panel = LobbyPanel(
            self.game_manager,
            self.player_url,
            on_start_game=self._handle_start_game,
            parent=self
        )
        self.live_panel = LivePanel(
            self.game_manager,
            on_next_question=self._handle_next_question,
            on_finish_game=self._handle_finish_game,
            parent=self
        )

        self.mode_stack.addWidget(self.setup_label)
        self.mode_stack.addWidget(self.lobby_panel)
        self.mode_stack.addWidget(self.live_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(HostMode.SETUP)

    def _build_action_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.import_button = QPushButton(HOST_BUTTON_IMPORT, self)
        self.import_button.clicked.connect(self._handle_import_questions)
        button_row.addWidget(self.import_button)

        self.create_button = QPushButton(HOST_BUTTON_CREATE, self)
        self.create_button.clicked.connect(self._handle_create_game)
        button_row.addWidget(self.create_button)

        self.replay_button = QPushButton(HOST_BUTTON_REPLAY, self)
        self.replay_button.clicked.connect(self._handle_replay_game)
        button_row.addWidget(self.replay_button)

        self.player_button = QPushButton(HOST_BUTTON_OPEN_PLAYER, self)
        self.player_button.clicked.connect(self._handle_open_player)
        button_row.addWidget(self.player_button)

        self.about_button = QPushButton(f"Acerca de {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Ayuda", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        layout.addLayout(button_row)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(LOBBY_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        if self._mode == HostMode.LIVE:
            self.live_panel.refresh()
        elif self._mode == HostMode.LOBBY:
            self.lobby_panel.refresh_players()

    def _set_mode(self, mode: HostMode) -> None:
        self._mode = mode
        in_lobby_or_live = mode in (HostMode.LOBBY, HostMode.LIVE)
        game_running = mode == HostMode.LIVE and self._game is not None and (
            self._game.status is GameStatus.IN_PROGRESS
        )
        self.import_button.setEnabled(not game_running)
        self.create_button.setEnabled(self._imported is not None and not game_running)
        self.replay_button.setEnabled(
            self._game is not None and self._game.status is GameStatus.FINISHED
        )
        self.player_button.setEnabled(in_lobby_or_live)

        index_map = {
            HostMode.SETUP: 0,
            HostMode.LOBBY: 1,
            HostMode.LIVE: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    def _handle_import_questions(self) -> None:
        if self._imported is not None and not confirm_replace_questions(self):
            return

        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            self._imported = load_questions_from_file(Path(file_path))
        except (OSError, QuestionImportError) as exc:
            show_error(self, "Error al importar", str(exc))
            return

        count = len(self._imported.questions)
        self.setup_label.setText(f"{self._imported.title}: {count} preguntas listas.")
        self._set_mode(HostMode.SETUP)
        show_info(self, "Preguntas importadas", f"Se importaron {count} preguntas.")

    def _handle_create_game(self) -> None:
        if self._imported is None:
            show_warning(self, "Sin preguntas", NO_QUESTIONS_MESSAGE)
            return
        try:
            game = self.game_manager.create_game(self._imported.title, self._imported.questions)
        except ValueError as exc:
            show_error(self, "Juego rechazado", str(exc))
            return
        self._show_lobby(game)
        show_info(self, GAME_CREATED_MESSAGE, f"PIN: {game.pin}")

    def _handle_replay_game(self) -> None:
        if self._game is None:
            return
        try:
            game = self.game_manager.replay_game(self._game.id)
        except LiveGameError as exc:
            show_error(self, "Error", str(exc))
            return
        self._show_lobby(game)
        show_info(self, GAME_REPLAYED_MESSAGE, f"PIN: {game.pin}")

    def _show_lobby(self, game: LiveGame) -> None:
        self._game = game
        self.lobby_panel.show_game(game.id, game.title, game.pin)
        self._set_mode(HostMode.LOBBY)

    def _handle_start_game(self) -> None:
        if self._game is None:
            return
        try:
            self._game = self.game_manager.start_game(self._game.id)
        except LiveGameError as exc:
            show_error(self, "Error", str(exc))
            return
        self.live_panel.show_game(self._game.id)
        self._set_mode(HostMode.LIVE)
        logger.info("%s (%s)", GAME_STARTED_MESSAGE, self._game.id)

    def _handle_next_question(self) -> None:
        if self._game is None:
            return
        try:
            self._game = self.game_manager.next_question(self._game.id)
        except LiveGameError as exc:
            show_error(self, "Error", str(exc))
            return
        self.live_panel.refresh()
        if self._game.status is GameStatus.FINISHED:
            self._set_mode(HostMode.LIVE)
            show_info(self, GAME_FINISHED_MESSAGE, self._final_standings())

    def _handle_finish_game(self) -> None:
        if self._game is None or not confirm_finish_game(self, self._game.title):
            return
        try:
            self._game = self.game_manager.finish_game(self._game.id)
        except LiveGameError as exc:
            show_error(self, "Error", str(exc))
            return
        self.live_panel.refresh()
        self._set_mode(HostMode.LIVE)
        show_info(self, GAME_FINISHED_MESSAGE, self._final_standings())

    def _final_standings(self) -> str:
        rows = self.game_manager.get_leaderboard(self._game.id, 3)
        if not rows:
            return GAME_FINISHED_MESSAGE
        return "\n".join(f"{row.rank}. {row.player_name} - {row.total_score}" for row in rows)

    def _handle_open_player(self) -> None:
        initial_pin = self._game.pin if self._game is not None else None
        window = PlayerWindow(self.game_manager, initial_pin=initial_pin)
        window.destroyed.connect(lambda _=None, w=window: self._forget_player_window(w))
        self._player_windows.append(window)
        window.show()

    def _forget_player_window(self, window: PlayerWindow) -> None:
        if window in self._player_windows:
            self._player_windows.remove(window)

    def _auto_load_default_questions(self) -> None:
        default_path = Path("live_questions.txt")
        if not default_path.exists():
            return
        try:
            self._imported = load_questions_from_file(default_path)
        except (OSError, QuestionImportError) as exc:
            logger.warning("Could not auto-load %s: %s", default_path, exc)
            return
        self.setup_label.setText(
            f"{self._imported.title}: {len(self._imported.questions)} preguntas listas."
        )
        self._set_mode(HostMode.SETUP)

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"Licencia: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"Acerca de {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"Ayuda de {APP_NAME}", HELP_TEXT)

    def closeEvent(self, event) -> None:
        for window in list(self._player_windows):
            window.close()
        super().closeEvent(event)

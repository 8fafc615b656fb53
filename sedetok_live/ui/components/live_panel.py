"""Component for the host's view of a running game."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from sedetok_live.constants.game_constants import LEADERBOARD_SIZE, MAX_OPTIONS
from sedetok_live.constants.ui_constants import HOST_BUTTON_FINISH, HOST_BUTTON_NEXT
from sedetok_live.core.errors import LiveGameError
from sedetok_live.core.game_manager import GameManager
from sedetok_live.core.models import GameStatus
from sedetok_live.styling.styles import Styles


class LivePanel(QWidget):
    """Shows the current question, answer stats and the leaderboard."""

    def __init__(
        self,
        game_manager: GameManager,
        on_next_question: callable,
        on_finish_game: callable,
        parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.game_manager = game_manager
        self.on_next_question = on_next_question
        self.on_finish_game = on_finish_game
        self.game_id: str | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.progress_label = QLabel("", self)
        self.progress_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.progress_label)

        self.question_label = QLabel("", self)
        self.question_label.setWordWrap(True)
        self.question_label.setStyleSheet("font-size: 18pt;")
        layout.addWidget(self.question_label)

        body_row = QHBoxLayout()

        options_column = QVBoxLayout()
        self.option_labels: list[QLabel] = []
        for idx in range(MAX_OPTIONS):
            label = QLabel("", self)
            label.setWordWrap(True)
            options_column.addWidget(label)
            self.option_labels.append(label)
        self.answers_label = QLabel("", self)
        options_column.addWidget(self.answers_label)
        self.correctness_label = QLabel("", self)
        options_column.addWidget(self.correctness_label)
        options_column.addStretch()
        body_row.addLayout(options_column, stretch=3)

        self.leaderboard_group = QGroupBox(f"Top {LEADERBOARD_SIZE}", self)
        self.leaderboard_group.setMinimumWidth(240)
        leaderboard_layout = QVBoxLayout()
        self.leaderboard_group.setLayout(leaderboard_layout)
        self.leaderboard_labels: list[QLabel] = []
        for idx in range(LEADERBOARD_SIZE):
            label = QLabel(f"{idx + 1}. —", self)
            label.setAlignment(Qt.AlignLeft)
            leaderboard_layout.addWidget(label)
            self.leaderboard_labels.append(label)
        leaderboard_layout.addStretch()
        body_row.addWidget(self.leaderboard_group, stretch=1)

        layout.addLayout(body_row, stretch=1)

        button_row = QHBoxLayout()
        button_row.addStretch()
        self.finish_button = QPushButton(HOST_BUTTON_FINISH, self)
        self.finish_button.clicked.connect(self.on_finish_game)
        button_row.addWidget(self.finish_button)
        self.next_button = QPushButton(HOST_BUTTON_NEXT, self)
        self.next_button.clicked.connect(self.on_next_question)
        button_row.addWidget(self.next_button)
        layout.addLayout(button_row)

    def show_game(self, game_id: str) -> None:
        self.game_id = game_id
        self.refresh()

    def refresh(self) -> None:
        if self.game_id is None:
            return
        try:
            game = self.game_manager.get_game(self.game_id)
            question = self.game_manager.get_current_question(self.game_id)
            total = len(self.game_manager.get_questions(self.game_id))
            leaderboard = self.game_manager.get_leaderboard(self.game_id, LEADERBOARD_SIZE)
        except LiveGameError:
            return

        running = game.status is GameStatus.IN_PROGRESS
        self.next_button.setEnabled(running)
        self.finish_button.setEnabled(running)
        self._update_leaderboard(leaderboard)

        if question is None:
            self.progress_label.setText(game.title)
            self.question_label.setText("")
            for label in self.option_labels:
                label.setVisible(False)
            self.answers_label.setText("")
            self.correctness_label.setText("")
            return

        self.progress_label.setText(f"{game.title} - Pregunta {question.order_index + 1} de {total}")
        self.question_label.setText(question.question_text)
        stats = self.game_manager.get_question_stats(self.game_id, question.id)
        answered = stats.answers_received or 1
        for idx, label in enumerate(self.option_labels):
            if idx >= len(question.options):
                label.setVisible(False)
                continue
            letter = chr(ord("A") + idx)
            marker = " ✓" if idx == question.correct_option_index else ""
            percentage = (stats.option_counts[idx] / answered) * 100
            label.setText(f"{letter}: {question.options[idx].text}{marker}  ({percentage:.0f}%)")
            label.setVisible(True)
        self.answers_label.setText(f"Respuestas recibidas: {stats.answers_received}")
        self.correctness_label.setText(f"Aciertos: {stats.correct_percentage:.0f}%")

    def _update_leaderboard(self, rows) -> None:
        for idx, label in enumerate(self.leaderboard_labels):
            if idx < len(rows):
                row = rows[idx]
                label.setText(f"{row.rank}. {row.player_name} - {row.total_score}")
            else:
                label.setText(f"{idx + 1}. —")

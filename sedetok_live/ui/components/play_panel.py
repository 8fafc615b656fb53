"""Component for the player's play screen."""

from __future__ import annotations

from functools import partial

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from sedetok_live.constants.game_constants import MAX_OPTIONS
from sedetok_live.constants.ui_constants import (
    PLAY_CORRECT,
    PLAY_FINISHED_TITLE,
    PLAY_INCORRECT,
    PLAY_LOADING_QUESTION,
    PLAY_POINTS_TEMPLATE,
    PLAY_RANK_TEMPLATE,
    PLAY_SCORE_TEMPLATE,
    PLAY_SECONDS_TEMPLATE,
    PLAY_SENDING,
    PLAY_TIMEOUT,
    PLAY_WAITING_MESSAGE,
)
from sedetok_live.core.models import GameStatus
from sedetok_live.core.services.gameplay import GameplaySession, PlayPhase
from sedetok_live.styling.styles import Styles


class PlayPanel(QWidget):
    """Renders a `GameplaySession`; option clicks go straight to it."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.session: GameplaySession | None = None
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header = QHBoxLayout()
        self.progress_label = QLabel("", self)
        header.addWidget(self.progress_label)
        header.addStretch()
        self.score_label = QLabel(PLAY_SCORE_TEMPLATE.format(score=0), self)
        header.addWidget(self.score_label)
        layout.addLayout(header)

        timer_row = QHBoxLayout()
        self.seconds_label = QLabel("", self)
        timer_row.addWidget(self.seconds_label)
        self.time_progress = QProgressBar(self)
        self.time_progress.setTextVisible(False)
        timer_row.addWidget(self.time_progress, stretch=1)
        layout.addLayout(timer_row)

        self.question_label = QLabel(PLAY_WAITING_MESSAGE, self)
        self.question_label.setWordWrap(True)
        self.question_label.setAlignment(Qt.AlignCenter)
        self.question_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.question_label, stretch=1)

        grid = QGridLayout()
        self.option_buttons: list[QPushButton] = []
        for idx in range(MAX_OPTIONS):
            button = QPushButton("", self)
            button.setStyleSheet(Styles.get_option_button_style(idx))
            button.clicked.connect(partial(self._handle_option_click, idx))
            grid.addWidget(button, idx // 2, idx % 2)
            self.option_buttons.append(button)
        layout.addLayout(grid)

        self.feedback_label = QLabel("", self)
        self.feedback_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.feedback_label)

        self.explanation_label = QLabel("", self)
        self.explanation_label.setWordWrap(True)
        self.explanation_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.explanation_label)

    def attach(self, session: GameplaySession) -> None:
        self.session = session

    def _handle_option_click(self, index: int) -> None:
        if self.session is not None:
            self.session.select_option(index)

    def render(self, session: GameplaySession) -> None:
        self.score_label.setText(PLAY_SCORE_TEMPLATE.format(score=session.total_score))

        if session.phase is PlayPhase.FINISHED:
            self._render_finished(session)
            return

        question = session.current_question
        if question is None:
            waiting = session.game is None or session.game.status is GameStatus.WAITING
            self.question_label.setText(PLAY_WAITING_MESSAGE if waiting else PLAY_LOADING_QUESTION)
            self.progress_label.setText("")
            self._set_timer_visible(False)
            for button in self.option_buttons:
                button.setVisible(False)
            self.feedback_label.setText("")
            self.explanation_label.setText("")
            return

        self.progress_label.setText(f"Pregunta {session.question_number} de {len(session.questions)}")
        self.question_label.setText(question.question_text)
        self._set_timer_visible(True)
        self.time_progress.setRange(0, question.time_limit_seconds)
        self.time_progress.setValue(session.seconds_left)
        self.seconds_label.setText(PLAY_SECONDS_TEMPLATE.format(seconds=session.seconds_left))

        active = session.phase is PlayPhase.QUESTION_ACTIVE
        for idx, button in enumerate(self.option_buttons):
            if idx >= len(question.options):
                button.setVisible(False)
                continue
            letter = chr(ord("A") + idx)
            selected = " ●" if session.selected_option == idx else ""
            button.setText(f"{letter}. {question.options[idx].text}{selected}")
            button.setVisible(True)
            button.setEnabled(active)

        self._render_feedback(session)

    def _render_feedback(self, session: GameplaySession) -> None:
        feedback = session.feedback
        if feedback is None:
            self.feedback_label.setText("")
            self.explanation_label.setText("")
            return
        if feedback.error_message:
            self.feedback_label.setStyleSheet(Styles.get_feedback_style(is_correct=False))
            self.feedback_label.setText(feedback.error_message)
        elif feedback.pending:
            self.feedback_label.setStyleSheet("")
            self.feedback_label.setText(PLAY_SENDING)
        elif feedback.timed_out:
            self.feedback_label.setStyleSheet(Styles.get_feedback_style(is_correct=False))
            self.feedback_label.setText(PLAY_TIMEOUT)
        else:
            headline = PLAY_CORRECT if feedback.is_correct else PLAY_INCORRECT
            points = PLAY_POINTS_TEMPLATE.format(points=feedback.points_earned)
            self.feedback_label.setStyleSheet(Styles.get_feedback_style(feedback.is_correct))
            self.feedback_label.setText(f"{headline}  {points}")
        self.explanation_label.setText(feedback.explanation or "")

    def _render_finished(self, session: GameplaySession) -> None:
        self.progress_label.setText("")
        self._set_timer_visible(False)
        for button in self.option_buttons:
            button.setVisible(False)
        self.question_label.setText(PLAY_FINISHED_TITLE)
        rank = session.rank
        self.feedback_label.setStyleSheet(Styles.get_large_label_style())
        self.feedback_label.setText(PLAY_RANK_TEMPLATE.format(rank=rank) if rank else "")
        self.explanation_label.setText(PLAY_SCORE_TEMPLATE.format(score=session.total_score))

    def _set_timer_visible(self, visible: bool) -> None:
        self.seconds_label.setVisible(visible)
        self.time_progress.setVisible(visible)

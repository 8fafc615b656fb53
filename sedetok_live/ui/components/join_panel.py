"""Component for the player's join screen."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from sedetok_live.constants.game_constants import PIN_LENGTH
from sedetok_live.constants.ui_constants import (
    JOIN_BUTTON,
    JOIN_JOINING_MESSAGE,
    JOIN_NAME_LABEL,
    JOIN_PIN_LABEL,
    JOIN_TITLE,
    JOIN_WAITING_MESSAGE,
)
from sedetok_live.core.services.join_flow import JoinFlow, JoinStep
from sedetok_live.styling.styles import Styles


class JoinPanel(QWidget):
    """PIN and name form. All state lives in the `JoinFlow`."""

    def __init__(self, flow: JoinFlow, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.flow = flow
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        title = QLabel(JOIN_TITLE, self)
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(title)

        form = QFormLayout()
        self.pin_input = QLineEdit(self)
        self.pin_input.setMaxLength(PIN_LENGTH)
        self.pin_input.setPlaceholderText("000000")
        self.pin_input.textEdited.connect(self._handle_pin_edited)
        form.addRow(JOIN_PIN_LABEL, self.pin_input)

        self.name_input = QLineEdit(self)
        self.name_input.textEdited.connect(self.flow.set_player_name)
        self.name_input.returnPressed.connect(self.flow.join)
        form.addRow(JOIN_NAME_LABEL, self.name_input)
        layout.addLayout(form)

        self.preview_label = QLabel("", self)
        self.preview_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.preview_label)

        self.join_button = QPushButton(JOIN_BUTTON, self)
        self.join_button.clicked.connect(self.flow.join)
        layout.addWidget(self.join_button)

        self.status_label = QLabel("", self)
        self.status_label.setAlignment(Qt.AlignCenter)
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)
        layout.addStretch()

    def _handle_pin_edited(self, text: str) -> None:
        normalized = self.flow.set_pin(text)
        if normalized != text:
            self.pin_input.setText(normalized)

    def render(self, flow: JoinFlow) -> None:
        editable = flow.step is JoinStep.NAME
        self.pin_input.setEnabled(editable)
        self.name_input.setEnabled(editable)
        self.join_button.setEnabled(flow.can_join())
        self.preview_label.setText(flow.game_preview.title if flow.game_preview else "")

        if flow.step is JoinStep.JOINING:
            self.status_label.setStyleSheet("")
            self.status_label.setText(JOIN_JOINING_MESSAGE)
        elif flow.step is JoinStep.WAITING:
            self.status_label.setStyleSheet("")
            self.status_label.setText(JOIN_WAITING_MESSAGE)
        elif flow.error_message:
            self.status_label.setStyleSheet(Styles.get_feedback_style(is_correct=False))
            self.status_label.setText(flow.error_message)
        else:
            self.status_label.setText("")

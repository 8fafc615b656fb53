"""Qt UI components for the host console and player windows."""

from .dialog_helpers import (
    confirm_finish_game,
    confirm_replace_questions,
    show_error,
    show_info,
    show_warning,
)
from .host_main_window import HostMainWindow
from .player_window import PlayerWindow
from .qt_scheduler import QtScheduler

__all__ = [
    "HostMainWindow",
    "PlayerWindow",
    "QtScheduler",
    "confirm_finish_game",
    "confirm_replace_questions",
    "show_error",
    "show_info",
    "show_warning",
]

"""Application entry point for Sedetok Live."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from sedetok_live.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from sedetok_live.core.game_manager import GameManager
from sedetok_live.core.services.evaluation_events import EvaluationEventRegistry
from sedetok_live.server.api_server import start_api_server
from sedetok_live.ui.host_main_window import HostMainWindow
from sedetok_live.utils.logging_config import configure_logging


def _determine_api_url(port: int) -> str:
    """Best-effort determination of the local IP for remote players."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting Sedetok Live...")

    game_manager = GameManager()
    evaluation_events = EvaluationEventRegistry()
    start_api_server(game_manager, evaluation_events, host=DEFAULT_HOST, port=DEFAULT_PORT)
    api_url = _determine_api_url(DEFAULT_PORT)
    logger.info("Game API available at %s", api_url)

    app = QApplication(sys.argv)
    window = HostMainWindow(game_manager=game_manager, player_url=api_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

"""Static metadata describing Sedetok Live."""

APP_NAME = "Sedetok Live"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Sedetok Live runs Kahoot-style quiz games for a classroom. "
    "The host creates a game, students join with a 6-digit PIN and answer "
    "against the clock; faster correct answers earn more points."
)

HELP_TEXT = (
    "Import a question file to create a game. Each block uses the format:\n\n"
    "Q: ¿Cuál es la capital de Colombia?\n"
    "A: Medellín\nB: Bogotá\nC: Cali\nD: Cartagena\n"
    "CORRECT: B\nTIMELIMIT: 20\nPOINTS: 1000\n"
    "FEEDBACK: Bogotá es la capital desde 1819.\n\n"
    "Blocks are separated by a blank line or '---'. Questions need between "
    "two and four options; TIMELIMIT, POINTS, FEEDBACK, IMAGE and VIDEO are optional."
)

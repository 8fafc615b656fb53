"""Utilities for importing a live game's questions from a plain-text file.

File format (repeat blocks separated by blank lines or '---'):

    Q: Question text. Additional lines until the next marker are treated as
       part of the question.
    A: First option text
    B: Second option text
    C: Third option text   (optional)
    D: Fourth option text  (optional)
    CORRECT: A|B|C|D
    TIMELIMIT: seconds     (optional, defaults to 20)
    POINTS: budget         (optional, defaults to 1000)
    FEEDBACK: text shown after answering (optional)
    IMAGE: url             (optional)
    VIDEO: url             (optional)

Example:

    Q: ¿Cuánto es 2 + 2?
    A: 3
    B: 4
    CORRECT: B
    TIMELIMIT: 15
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sedetok_live.constants.game_constants import (
    DEFAULT_POINTS,
    DEFAULT_TIME_LIMIT_SECONDS,
    MAX_OPTIONS,
    MIN_OPTIONS,
)
from sedetok_live.core.errors import QuestionImportError
from sedetok_live.core.models import QuestionDraft


@dataclass(slots=True)
class ImportedQuestionSet:
    """Container for imported questions and where they came from."""

    source_path: Path
    title: str
    questions: list[QuestionDraft]


_OPTION_ORDER = ["A", "B", "C", "D"]
_INTEGER_KEYS = ("TIMELIMIT", "POINTS")
_TEXT_KEYS = ("FEEDBACK", "IMAGE", "VIDEO")


def load_questions_from_file(file_path: Path) -> ImportedQuestionSet:
    text = file_path.read_text(encoding="utf-8")
    questions = parse_questions(text)
    if not questions:
        raise QuestionImportError("Question file did not contain any questions.")
    return ImportedQuestionSet(
        source_path=file_path,
        title=file_path.stem.replace("_", " ").strip() or "Juego en vivo",
        questions=questions,
    )


def parse_questions(text: str) -> list[QuestionDraft]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_block(block: str) -> QuestionDraft:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    integers: dict[str, int] = {}
    texts: dict[str, str] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        key = upper.split(":", 1)[0]
        if ":" in line and key in _INTEGER_KEYS:
            integers[key] = _parse_positive_int(key, line.split(":", 1)[1].strip())
            current_section = None
            continue

        if ":" in line and key in _TEXT_KEYS:
            texts[key] = line.split(":", 1)[1].strip()
            current_section = key if key == "FEEDBACK" else None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        elif current_section == "FEEDBACK":
            texts["FEEDBACK"] = texts["FEEDBACK"] + f"\n{line}"
        else:
            raise QuestionImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuestionImportError("Question text missing (Q: ...)")

    letters = [letter for letter in _OPTION_ORDER if letter in options]
    if letters != _OPTION_ORDER[: len(letters)]:
        raise QuestionImportError("Options must be consecutive starting at A.")
    if not MIN_OPTIONS <= len(letters) <= MAX_OPTIONS:
        raise QuestionImportError(
            f"Each question must define between {MIN_OPTIONS} and {MAX_OPTIONS} options."
        )

    option_list = [options[letter].strip() for letter in letters]
    if any(not opt for opt in option_list):
        raise QuestionImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuestionImportError("CORRECT is required for live game questions.")
    if correct_letter not in letters:
        raise QuestionImportError(f"CORRECT must be one of {', '.join(letters)}.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuestionImportError("Question text cannot be empty.")

    return QuestionDraft(
        question_text=question_text,
        options=option_list,
        correct_option_index=letters.index(correct_letter),
        points=integers.get("POINTS", DEFAULT_POINTS),
        time_limit_seconds=integers.get("TIMELIMIT", DEFAULT_TIME_LIMIT_SECONDS),
        image_url=texts.get("IMAGE") or None,
        video_url=texts.get("VIDEO") or None,
        feedback=texts.get("FEEDBACK") or None,
    )


def _parse_positive_int(key: str, raw_value: str) -> int:
    if not raw_value:
        raise QuestionImportError(f"{key} must include an integer value.")
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise QuestionImportError(f"{key} must be an integer.") from exc
    if parsed_value <= 0:
        raise QuestionImportError(f"{key} must be a positive integer.")
    return parsed_value

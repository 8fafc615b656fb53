"""Service for storing games and their question sets."""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from sedetok_live.constants.game_constants import MAX_OPTIONS, MIN_OPTIONS
from sedetok_live.core.codes import generate_pin
from sedetok_live.core.errors import GameNotFoundError, QuestionNotFoundError
from sedetok_live.core.models import (
    LiveGame,
    LiveGameQuestion,
    QuestionDraft,
    QuestionOption,
)


class GameRepository:
    """Owns game rows, the PIN index and the immutable question lists."""

    def __init__(self) -> None:
        self._games: dict[str, LiveGame] = {}
        self._questions: dict[str, list[LiveGameQuestion]] = {}
        self._pins: dict[str, str] = {}

    def create_game(
        self,
        title: str,
        drafts: list[QuestionDraft],
        creator_id: str | None = None,
    ) -> LiveGame:
        cleaned_title = title.strip()
        if not cleaned_title:
            raise ValueError("Game title must not be empty.")
        if not drafts:
            raise ValueError("A game must contain at least one question.")

        game_id = uuid4().hex
        questions = [self._prepare_question(game_id, index, draft) for index, draft in enumerate(drafts)]
        game = LiveGame(
            id=game_id,
            title=cleaned_title,
            pin=generate_pin(set(self._pins)),
            creator_id=creator_id,
        )
        self._games[game_id] = game
        self._questions[game_id] = questions
        self._pins[game.pin] = game_id
        return game

    def copy_game(self, game_id: str) -> LiveGame:
        """Create a fresh waiting game with the same title and questions."""
        original = self.get_game(game_id)
        new_id = uuid4().hex
        game = LiveGame(
            id=new_id,
            title=original.title,
            pin=generate_pin(set(self._pins)),
            creator_id=original.creator_id,
        )
        self._games[new_id] = game
        self._questions[new_id] = [
            replace(question, id=uuid4().hex, game_id=new_id)
            for question in self._questions[game_id]
        ]
        self._pins[game.pin] = new_id
        return game

    def get_game(self, game_id: str) -> LiveGame:
        game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(f"Game {game_id} does not exist.")
        return game

    def find_by_pin(self, pin: str) -> LiveGame:
        game_id = self._pins.get(pin)
        if game_id is None:
            raise GameNotFoundError(f"No game uses PIN {pin}.")
        return self._games[game_id]

    def list_games(self, creator_id: str | None = None) -> list[LiveGame]:
        games = [
            game for game in self._games.values()
            if creator_id is None or game.creator_id == creator_id
        ]
        return sorted(games, key=lambda g: g.created_at, reverse=True)

    def delete_game(self, game_id: str) -> None:
        game = self.get_game(game_id)
        del self._games[game_id]
        del self._questions[game_id]
        self._pins.pop(game.pin, None)

    def get_questions(self, game_id: str) -> list[LiveGameQuestion]:
        self.get_game(game_id)
        return list(self._questions[game_id])

    def get_question(self, game_id: str, question_id: str) -> LiveGameQuestion:
        for question in self.get_questions(game_id):
            if question.id == question_id:
                return question
        raise QuestionNotFoundError(f"Question {question_id} is not part of game {game_id}.")

    def get_question_count(self, game_id: str) -> int:
        return len(self.get_questions(game_id))

    def _prepare_question(self, game_id: str, index: int, draft: QuestionDraft) -> LiveGameQuestion:
        """Validate and normalize a question before storage."""
        cleaned_text = draft.question_text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")

        options = self._validate_options(draft.options, draft.option_image_urls)
        if not 0 <= draft.correct_option_index < len(options):
            raise ValueError(
                f"Correct option index must be between 0 and {len(options) - 1}."
            )
        if draft.points <= 0:
            raise ValueError("Points must be a positive integer.")
        if draft.time_limit_seconds <= 0:
            raise ValueError("Time limit must be a positive integer.")

        return LiveGameQuestion(
            id=uuid4().hex,
            game_id=game_id,
            order_index=index,
            question_text=cleaned_text,
            options=options,
            correct_option_index=draft.correct_option_index,
            points=draft.points,
            time_limit_seconds=draft.time_limit_seconds,
            image_url=draft.image_url or None,
            video_url=draft.video_url or None,
            feedback=(draft.feedback or "").strip() or None,
        )

    @staticmethod
    def _validate_options(
        options: list[str], image_urls: list[str | None]
    ) -> tuple[QuestionOption, ...]:
        if not MIN_OPTIONS <= len(options) <= MAX_OPTIONS:
            raise ValueError(
                f"Each question must have between {MIN_OPTIONS} and {MAX_OPTIONS} options."
            )
        cleaned = [option.strip() for option in options]
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return tuple(
            QuestionOption(
                text=text,
                image_url=(image_urls[i] if i < len(image_urls) else None) or None,
            )
            for i, text in enumerate(cleaned)
        )

"""
Game session orchestration.

GameSession drives the engine for one player: it owns the grid, the score
and the phase, and reports the final score once the board locks up.
GameApp adds the menu/game screen switch the front-ends share.
"""

import random
from enum import Enum
from typing import Any, Callable

from controls import Command, InputEvent
from game import (
    Direction,
    GameConfig,
    MoveResult,
    add_random_tile,
    clone_grid,
    create_initial_grid,
    is_game_over,
    simulate_move,
    validate_grid,
)
from logger import GameLogger
from scores import MAX_NICKNAME_LENGTH, LocalTopScores, ScoreBoardClient, ScoreRecord

type ScoreSubmitter = Callable[[ScoreRecord], Any]


class Phase(Enum):
    READY = "ready"
    PLAYING = "playing"
    OVER = "over"


class Screen(Enum):
    MENU = "menu"
    GAME = "game"


def normalize_nickname(nickname: str | None) -> str:
    return (nickname or "").strip()[:MAX_NICKNAME_LENGTH]


class GameSession:
    """
    One game from first spawn to game over.

    Phases: READY (fresh board) -> PLAYING (after the first successful move)
    -> OVER (no move possible). OVER absorbs further moves; restart() always
    goes back to READY with a new board and a zero score.
    """

    def __init__(
        self,
        nickname: str | None = None,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
        submit_score: ScoreSubmitter | None = None,
        top_scores: LocalTopScores | None = None,
        logger: GameLogger | None = None,
    ):
        self.nickname = normalize_nickname(nickname)
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.submit_score = submit_score
        self.top_scores = top_scores
        self.logger = logger
        self.submissions = 0
        self.restart()

    @property
    def over(self) -> bool:
        return self.phase == Phase.OVER

    def restart(self) -> None:
        """Full reset: fresh two-tile board, score 0, READY."""
        self.grid = create_initial_grid(self.rng, self.config.four_probability)
        self.score = 0
        self.phase = Phase.READY
        self.moves = 0
        self.submissions = 0
        self._log("start", {"nickname": self.nickname, "grid": clone_grid(self.grid)})

    def move(self, direction: Direction | str | None) -> MoveResult | None:
        """
        Play one directional input.

        Returns the engine's MoveResult, or None when the input was ignored
        (unknown direction, or the game is already over). A result with
        moved=False leaves the session untouched.
        """
        direction = Direction.parse(direction)
        if direction is None or self.phase == Phase.OVER:
            return None

        validate_grid(self.grid)
        result = simulate_move(self.grid, direction)
        if not result.moved:
            return result

        self.grid = clone_grid(result.grid)
        spawned = add_random_tile(self.grid, self.rng, self.config.four_probability)
        self.score += result.score_gained
        self.moves += 1
        self.phase = Phase.PLAYING
        self._log(
            "move",
            {
                "direction": direction.value,
                "score_gained": result.score_gained,
                "score": self.score,
                "spawned": list(spawned) if spawned else None,
            },
        )

        if is_game_over(self.grid):
            self._finish()
        return result

    def handle(self, event: InputEvent | str | None) -> MoveResult | None:
        """Dispatch a direction or a RESTART command; everything else is ignored."""
        if event == Command.RESTART:
            self._log("restart", {"score": self.score, "phase": self.phase.value})
            self.restart()
            return None
        if isinstance(event, Command):
            return None
        return self.move(event)

    def _finish(self) -> None:
        self.phase = Phase.OVER
        self._log("game_over", {"score": self.score, "moves": self.moves})

        if self.top_scores is not None:
            self.top_scores.record(self.score)

        # at most one submission per session, with the total after the final move
        if self.nickname and self.submit_score is not None and self.submissions == 0:
            self.submissions += 1
            self.submit_score(ScoreRecord(nickname=self.nickname, score=self.score))

    def _log(self, event: str, data: dict[str, Any]) -> None:
        if self.logger is not None:
            self.logger.log(event, data)


class GameApp:
    """Menu and game screens around a single GameSession."""

    def __init__(
        self,
        config: GameConfig | None = None,
        client: ScoreBoardClient | None = None,
        top_scores: LocalTopScores | None = None,
        logger: GameLogger | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config or GameConfig()
        self.client = client
        self.top_scores = top_scores or LocalTopScores(size=self.config.local_top_scores)
        self.logger = logger
        self.rng = rng
        self.screen = Screen.MENU
        self.nickname = ""
        self.session: GameSession | None = None

    def start_game(self, nickname: str | None = None) -> GameSession:
        if nickname is not None:
            self.nickname = normalize_nickname(nickname)
        self.session = GameSession(
            nickname=self.nickname,
            config=self.config,
            rng=self.rng,
            submit_score=self.client.submit_in_background if self.client else None,
            top_scores=self.top_scores,
            logger=self.logger,
        )
        self.screen = Screen.GAME
        return self.session

    def go_to_menu(self) -> None:
        self.screen = Screen.MENU

    def handle(self, event: InputEvent | str | None) -> MoveResult | None:
        if event == Command.MENU:
            self.go_to_menu()
            return None
        if self.screen != Screen.GAME or self.session is None:
            return None
        return self.session.handle(event)

    def ranking(self) -> list[ScoreRecord]:
        if self.client is None:
            return []
        return self.client.fetch_ranking(self.config.ranking_limit)

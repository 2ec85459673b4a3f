"""
Score board collaborators: the remote ranking client and the local
top-scores list.
"""

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

import httpx
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger("merge2048.scores")

DEFAULT_SCORE_URL = "http://localhost:5051"
MAX_NICKNAME_LENGTH = 32


class ScoreRecord(BaseModel):
    nickname: str = Field(min_length=1, max_length=MAX_NICKNAME_LENGTH)
    score: int = Field(ge=0)


class ScoreBoardConfig(BaseModel):
    base_url: str = DEFAULT_SCORE_URL
    timeout: float = 5.0


class ScoreBoardClient:
    """
    HTTP client for the score server.

    Failures never propagate: submit_score logs and returns False,
    fetch_ranking logs and returns an empty list.
    """

    def __init__(
        self,
        config: ScoreBoardConfig | None = None,
        client: httpx.Client | None = None,
    ):
        self.config = config or ScoreBoardConfig()
        self._client = client or httpx.Client(
            base_url=self.config.base_url, timeout=self.config.timeout
        )
        self._executor: ThreadPoolExecutor | None = None

    def submit_score(self, record: ScoreRecord) -> bool:
        try:
            response = self._client.post("/api/scores", json=record.model_dump())
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Score submit error: %s", e)
            return False
        return True

    def submit_in_background(self, record: ScoreRecord) -> Future:
        """Fire-and-forget submission on a worker thread."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="score-submit"
            )
        return self._executor.submit(self.submit_score, record)

    def fetch_ranking(self, limit: int = 10) -> list[ScoreRecord]:
        try:
            response = self._client.get("/api/ranking", params={"limit": limit})
            response.raise_for_status()
            return [ScoreRecord(**item) for item in response.json()["scores"]]
        except (httpx.HTTPError, KeyError, TypeError, ValueError, ValidationError) as e:
            logger.error("Fetch ranking error: %s", e)
            return []

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class LocalTopScores:
    """
    Best scores seen on this device, kept sorted descending and truncated
    to `size`. Persisted as a JSON list when `path` is given.
    """

    def __init__(self, path: str | Path | None = None, size: int = 5):
        self.path = Path(path) if path is not None else None
        self.size = size
        self.scores: list[int] = self._load()

    def _load(self) -> list[int]:
        if self.path is None or not self.path.exists():
            return []
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable top scores file %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            return []
        scores = [s for s in data if isinstance(s, int) and not isinstance(s, bool)]
        return sorted(scores, reverse=True)[: self.size]

    def record(self, score: int) -> list[int]:
        """Append a final score, keep the best `size`, persist."""
        self.scores = sorted([*self.scores, score], reverse=True)[: self.size]
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self.scores, f)
        return list(self.scores)

import random

import pytest

from game import GameConfig
from scores import LocalTopScores
from session import GameSession

# Full board after a LEFT move plus a spawned 2 in the bottom-right corner:
# rows 0-2 cannot move; row 3 merges 4+4 and leaves (3, 3) empty.
NEARLY_OVER = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 4, 2, 8],
]


class RecordingSubmitter:
    def __init__(self):
        self.records = []

    def __call__(self, record):
        self.records.append(record)


@pytest.fixture()
def submitter() -> RecordingSubmitter:
    return RecordingSubmitter()


@pytest.fixture()
def make_session(submitter):
    """Build a seeded session that only ever spawns 2s."""

    def _make(nickname="tester", **kwargs):
        kwargs.setdefault("config", GameConfig(four_probability=0.0))
        kwargs.setdefault("rng", random.Random(2048))
        kwargs.setdefault("submit_score", submitter)
        kwargs.setdefault("top_scores", LocalTopScores())
        return GameSession(nickname=nickname, **kwargs)

    return _make


@pytest.fixture()
def nearly_over():
    return [row[:] for row in NEARLY_OVER]

import pytest

from controls import Command, direction_from_swipe, event_from_key
from game import SWIPE_THRESHOLD, Direction, GameConfig


@pytest.mark.parametrize(
    "key, expected",
    [
        ("w", Direction.UP),
        ("W", Direction.UP),
        ("a", Direction.LEFT),
        ("s", Direction.DOWN),
        ("d", Direction.RIGHT),
        ("\x1b[A", Direction.UP),
        ("\x1b[B", Direction.DOWN),
        ("\x1b[C", Direction.RIGHT),
        ("\x1b[D", Direction.LEFT),
        ("ArrowLeft", Direction.LEFT),
        ("ArrowUp", Direction.UP),
        ("r", Command.RESTART),
        ("M", Command.MENU),
        ("q", Command.QUIT),
        ("x", None),
        ("Enter", None),
    ],
)
def test_event_from_key(key, expected):
    assert event_from_key(key) is expected


@pytest.mark.parametrize(
    "dx, dy, expected",
    [
        (0, 0, None),
        (30, 0, None),
        (-30, 20, None),
        (31, 0, Direction.RIGHT),
        (-45, 10, Direction.LEFT),
        (10, 50, Direction.DOWN),
        (5, -31, Direction.UP),
        # equal displacement resolves vertically
        (40, 40, Direction.DOWN),
    ],
)
def test_direction_from_swipe(dx, dy, expected):
    assert direction_from_swipe(dx, dy) is expected


def test_direction_from_swipe_custom_threshold():
    assert direction_from_swipe(40, 0, threshold=50) is None
    assert direction_from_swipe(60, 0, threshold=50) is Direction.RIGHT


def test_default_swipe_threshold_matches_game_config():
    threshold = GameConfig().swipe_threshold
    assert threshold == SWIPE_THRESHOLD
    assert direction_from_swipe(threshold, 0) is None
    assert direction_from_swipe(threshold + 1, 0) is Direction.RIGHT

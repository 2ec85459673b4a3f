"""Translate raw keyboard and touch input into game events."""

from enum import Enum

from game import SWIPE_THRESHOLD, Direction


class Command(Enum):
    RESTART = "restart"
    MENU = "menu"
    QUIT = "quit"


type InputEvent = Direction | Command

# terminal keys (arrow keys send 3 characters: ESC [ A/B/C/D) and browser key names
KEY_TO_EVENT: dict[str, InputEvent] = {
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
    "\x1b[A": Direction.UP,
    "\x1b[B": Direction.DOWN,
    "\x1b[C": Direction.RIGHT,
    "\x1b[D": Direction.LEFT,
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "r": Command.RESTART,
    "m": Command.MENU,
    "q": Command.QUIT,
}


def event_from_key(key: str) -> InputEvent | None:
    """Map a key to an event; unknown keys map to None."""
    if len(key) == 1:
        key = key.lower()
    return KEY_TO_EVENT.get(key)


def direction_from_swipe(
    dx: float, dy: float, threshold: float = SWIPE_THRESHOLD
) -> Direction | None:
    """
    Direction of a swipe from its displacement (screen coordinates, y grows
    downwards). The dominant axis wins; swipes not longer than `threshold`
    are ignored.
    """
    abs_x, abs_y = abs(dx), abs(dy)
    if max(abs_x, abs_y) <= threshold:
        return None
    if abs_x > abs_y:
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP

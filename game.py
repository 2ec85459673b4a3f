from dataclasses import dataclass
from enum import Enum
import random

from pydantic import BaseModel, Field

GRID_SIZE = 4
SWIPE_THRESHOLD = 30.0  # minimum swipe displacement, in pixels

type Grid = list[list[int]]
type Cell = tuple[int, int]


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value) -> "Direction | None":
        """
        Resolve a direction from an enum member or its (case-insensitive) name.
        Anything else resolves to None so callers can ignore it.
        """
        if isinstance(value, Direction):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class GameConfig(BaseModel):
    """Tunable game rules and front-end knobs."""

    four_probability: float = Field(0.1, ge=0.0, le=1.0)
    swipe_threshold: float = SWIPE_THRESHOLD
    local_top_scores: int = Field(5, ge=1)
    ranking_limit: int = Field(10, ge=1)


class InvalidGridError(ValueError):
    """Raised when a grid breaks the board invariants."""


@dataclass(frozen=True)
class MoveResult:
    grid: Grid
    score_gained: int
    moved: bool


def create_empty_grid() -> Grid:
    return [[0 for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


def clone_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def empty_cells(grid: Grid) -> list[Cell]:
    """Coordinates of every empty cell, in row-major order."""
    return [
        (i, j)
        for i in range(GRID_SIZE)
        for j in range(GRID_SIZE)
        if grid[i][j] == 0
    ]


def validate_grid(grid: Grid) -> None:
    """
    Check the board invariants: GRID_SIZE x GRID_SIZE, and every non-zero
    cell is a power of two >= 2. Raises InvalidGridError otherwise.
    """
    if len(grid) != GRID_SIZE or any(len(row) != GRID_SIZE for row in grid):
        raise InvalidGridError(f"grid must be {GRID_SIZE}x{GRID_SIZE}")

    for i, row in enumerate(grid):
        for j, value in enumerate(row):
            if value == 0:
                continue
            # power of two: exactly one bit set
            if not isinstance(value, int) or value < 2 or value & (value - 1):
                raise InvalidGridError(
                    f"cell ({i}, {j}) holds {value!r}, expected 0 or a power of two"
                )


def combine_line(line: list[int]) -> tuple[list[int], int]:
    """
    Slide and merge a single line towards its start.
    Returns (combined_line, score_gained). Each tile merges at most once.
    """
    non_zero = [x for x in line if x != 0]

    merged = []
    score = 0
    i = 0
    while i < len(non_zero):
        if i + 1 < len(non_zero) and non_zero[i] == non_zero[i + 1]:
            value = non_zero[i] * 2
            merged.append(value)
            score += value  # points = value of merged tile
            i += 2
        else:
            merged.append(non_zero[i])
            i += 1

    return merged + [0] * (len(line) - len(merged)), score


def line_coordinates(direction: Direction) -> list[list[Cell]]:
    """
    The cells of every line for a move, each ordered from the edge the tiles
    slide towards. Reading and writing through these coordinates reduces all
    four directions to combine_line.
    """
    forward = list(range(GRID_SIZE))
    backward = forward[::-1]

    if direction == Direction.LEFT:
        return [[(i, j) for j in forward] for i in forward]
    if direction == Direction.RIGHT:
        return [[(i, j) for j in backward] for i in forward]
    if direction == Direction.UP:
        return [[(i, j) for i in forward] for j in forward]
    if direction == Direction.DOWN:
        return [[(i, j) for i in backward] for j in forward]
    raise ValueError(f"unknown direction: {direction!r}")


def simulate_move(grid: Grid, direction: Direction) -> MoveResult:
    """
    Apply a move to a copy of the grid. The input grid is never mutated, so
    every line is compared against its untouched original.
    """
    new_grid = clone_grid(grid)
    total_score = 0
    moved = False

    for coords in line_coordinates(direction):
        before = [grid[i][j] for i, j in coords]
        after, score = combine_line(before)
        if after != before:
            moved = True
        total_score += score
        for (i, j), value in zip(coords, after):
            new_grid[i][j] = value

    return MoveResult(grid=new_grid, score_gained=total_score, moved=moved)


def add_random_tile(
    grid: Grid, rng: random.Random | None = None, four_probability: float = 0.1
) -> Cell | None:
    """
    Add a new tile (90% chance of 2, 10% chance of 4) to a random empty cell,
    in place. Returns the cell used, or None when the board is full.
    """
    rng = rng or random
    cells = empty_cells(grid)
    if not cells:
        return None

    row, col = rng.choice(cells)
    grid[row][col] = 4 if rng.random() < four_probability else 2
    return row, col


def create_initial_grid(
    rng: random.Random | None = None, four_probability: float = 0.1
) -> Grid:
    """Empty board with two random tiles placed."""
    grid = create_empty_grid()
    add_random_tile(grid, rng, four_probability)
    add_random_tile(grid, rng, four_probability)
    return grid


def is_game_over(grid: Grid) -> bool:
    """
    Over when the board is full and no two horizontally or vertically
    adjacent cells are equal.
    """
    for i in range(GRID_SIZE):
        for j in range(GRID_SIZE):
            if grid[i][j] == 0:
                return False
            if j < GRID_SIZE - 1 and grid[i][j] == grid[i][j + 1]:
                return False
            if i < GRID_SIZE - 1 and grid[i][j] == grid[i + 1][j]:
                return False
    return True


def valid_directions(grid: Grid) -> list[Direction]:
    """Directions that would change the grid."""
    return [d for d in Direction if simulate_move(grid, d).moved]


def format_grid(grid: Grid, indent: str = "  ") -> str:
    """
    Format a grid for pretty printing.
    Empty cells are shown as '.'.
    """
    lines = []
    # find max width needed for any cell
    max_val = max(cell for row in grid for cell in row)
    cell_width = max(4, len(str(max_val)) + 1)
    rule = "─" * (cell_width * GRID_SIZE + GRID_SIZE - 1)

    lines.append(indent + "┌" + rule + "┐")
    for i, row in enumerate(grid):
        cells = [(str(cell) if cell else ".").center(cell_width) for cell in row]
        lines.append(indent + "│" + "│".join(cells) + "│")
        if i < GRID_SIZE - 1:
            lines.append(indent + "├" + rule + "┤")
    lines.append(indent + "└" + rule + "┘")

    return "\n".join(lines)

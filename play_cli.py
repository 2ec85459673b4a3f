"""
CLI 2048 game client for terminal play.
Run with: python play_cli.py play --nickname NAME
"""
import random
import sys
import termios
import tty
from pathlib import Path
from typing import Optional

import typer

from controls import Command, event_from_key
from game import Direction, GameConfig, format_grid
from logger import GameLogger
from scores import DEFAULT_SCORE_URL, LocalTopScores, ScoreBoardClient, ScoreBoardConfig
from session import GameApp, Phase, Screen, normalize_nickname

app = typer.Typer(help="Play 2048 in the terminal and browse the score board")

DEFAULT_TOP_SCORES_FILE = Path.home() / ".merge2048" / "top_scores.json"


def get_key():
    """Get a single keypress from the terminal."""
    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(sys.stdin.fileno())
        ch = sys.stdin.read(1)
        # Handle arrow keys (they send 3 characters: ESC [ A/B/C/D)
        if ch == '\x1b':
            ch += sys.stdin.read(2)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    return ch


def clear_screen():
    """Clear the terminal screen."""
    typer.echo("\033[2J\033[H", nl=False)


def draw_menu(game_app: GameApp, message=""):
    clear_screen()

    typer.echo("=" * 30)
    typer.echo("         2048 GAME")
    typer.echo("=" * 30)
    if game_app.nickname:
        typer.echo(f"Player: {game_app.nickname}")
    typer.echo()

    typer.echo("Ranking:")
    ranking = game_app.ranking()
    if not ranking:
        typer.echo("  (no scores yet)")
    for i, record in enumerate(ranking, start=1):
        typer.echo(f"  #{i:<3} {record.nickname:<20} {record.score:>8}")
    typer.echo()

    typer.echo("Top Scores (this device):")
    for i, score in enumerate(game_app.top_scores.scores, start=1):
        typer.echo(f"  #{i}: {score}")
    typer.echo()

    if message:
        typer.echo(message)

    typer.echo("\nControls:")
    typer.echo("  S/Enter: Start Game  Q: Quit")


def draw_board(game_app: GameApp, message=""):
    """Draw the game board in the terminal."""
    session = game_app.session
    clear_screen()

    typer.echo("=" * 30)
    typer.echo("         2048 GAME")
    typer.echo("=" * 30)
    typer.echo(f"Score: {session.score}")
    typer.echo()
    typer.echo(format_grid(session.grid))
    typer.echo()

    if message:
        typer.echo(message)

    typer.echo("\nControls:")
    typer.echo("  ↑/W: Up    ↓/S: Down")
    typer.echo("  ←/A: Left  →/D: Right")
    typer.echo("  R: Restart  M: Menu  Q: Quit")


def run(game_app: GameApp):
    """Main loop: menu screen, then game screen, until Q."""
    draw_menu(game_app, "Welcome!")

    while True:
        key = get_key()
        event = event_from_key(key)

        if event == Command.QUIT:
            clear_screen()
            typer.echo("Thanks for playing!")
            break

        if game_app.screen == Screen.MENU:
            if key.lower() == "s" or key in ("\r", "\n"):
                game_app.start_game()
                draw_board(game_app, "Use arrow keys or WASD to play.")
            continue

        if event == Command.MENU:
            game_app.go_to_menu()
            draw_menu(game_app)
            continue

        session = game_app.session
        if event == Command.RESTART:
            game_app.handle(event)
            draw_board(game_app, "Game restarted!")
            continue

        if session.over:
            draw_board(game_app, "GAME OVER! Press R to restart, M for menu or Q to quit.")
            continue

        if not isinstance(event, Direction):
            continue

        result = game_app.handle(event)
        if result is not None and not result.moved:
            draw_board(game_app, f"Can't move {event.value}! Try another direction.")
        elif session.phase == Phase.OVER:
            draw_board(game_app, f"GAME OVER! Final Score: {session.score}")
        else:
            message = f"Last move: +{result.score_gained}" if result.score_gained else ""
            draw_board(game_app, message)


@app.command()
def play(
    nickname: str = typer.Option(
        "", "--nickname", "-n", help="Name to submit to the score board at game over"
    ),
    score_url: str = typer.Option(
        DEFAULT_SCORE_URL,
        "--score-url",
        envvar="MERGE2048_SCORE_URL",
        help="Base URL of the score server",
    ),
    offline: bool = typer.Option(False, "--offline", help="Do not contact the score server"),
    top_scores_file: Path = typer.Option(
        DEFAULT_TOP_SCORES_FILE, "--top-scores-file", help="Where local top scores are kept"
    ),
    log_dir: Optional[str] = typer.Option(
        None, "--log-dir", help="Directory for JSONL game event logs"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tile spawning"),
    four_probability: float = typer.Option(
        0.1, "--four-probability", help="Chance that a spawned tile is a 4"
    ),
):
    """Play 2048 yourself! Controls: WASD or Arrow keys, R restart, M menu, Q quit."""
    config = GameConfig(four_probability=four_probability)
    client = None if offline else ScoreBoardClient(ScoreBoardConfig(base_url=score_url))

    with GameLogger(log_dir=log_dir) as game_logger:
        game_app = GameApp(
            config=config,
            client=client,
            top_scores=LocalTopScores(top_scores_file, size=config.local_top_scores),
            logger=game_logger,
            rng=random.Random(seed),
        )
        game_app.nickname = normalize_nickname(nickname)
        try:
            run(game_app)
        except KeyboardInterrupt:
            clear_screen()
            typer.echo("\nGame interrupted. Goodbye!")
        finally:
            if client is not None:
                client.close()


@app.command()
def ranking(
    limit: int = typer.Option(10, "--limit", "-l", help="Number of records to show"),
    score_url: str = typer.Option(
        DEFAULT_SCORE_URL,
        "--score-url",
        envvar="MERGE2048_SCORE_URL",
        help="Base URL of the score server",
    ),
):
    """Show the remote top scores."""
    with ScoreBoardClient(ScoreBoardConfig(base_url=score_url)) as client:
        records = client.fetch_ranking(limit)

    if not records:
        typer.echo("No scores yet.")
        return
    for i, record in enumerate(records, start=1):
        typer.echo(f"#{i:<3} {record.nickname:<20} {record.score:>8}")


if __name__ == "__main__":
    app()

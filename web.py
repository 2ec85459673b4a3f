"""
Browser 2048 client built with NiceGUI.
Run with: python web.py   (MERGE2048_SCORE_URL points at the score server)
"""
import os
from pathlib import Path

from nicegui import app, run, ui

from controls import Command, direction_from_swipe, event_from_key
from game import GameConfig
from scores import (
    DEFAULT_SCORE_URL,
    LocalTopScores,
    ScoreBoardClient,
    ScoreBoardConfig,
    ScoreRecord,
)
from session import GameApp, Screen

TILE_COLORS = {
    0: "#CDC1B4",
    2: "#EEE4DA",
    4: "#EDE0C8",
    8: "#F2B179",
    16: "#F59563",
    32: "#F67C5F",
    64: "#F65E3B",
    128: "#EDCF72",
    256: "#EDCC61",
    512: "#EDC850",
    1024: "#EDC53F",
    2048: "#EDC22E",
}
DEFAULT_TILE_COLOR = "#3C3A32"

# touch positions are reported as one {x, y} object per event
TOUCH_POINT_JS = "(e) => emit({x: e.changedTouches[0].clientX, y: e.changedTouches[0].clientY})"


# one client (connection pool and submit worker) shared by every page
score_client = ScoreBoardClient(
    ScoreBoardConfig(base_url=os.environ.get("MERGE2048_SCORE_URL", DEFAULT_SCORE_URL))
)
app.on_shutdown(score_client.close)


def create_game_app(client: ScoreBoardClient = score_client) -> GameApp:
    config = GameConfig()
    top_scores_file = Path(
        os.environ.get("MERGE2048_TOP_SCORES", Path.home() / ".merge2048" / "top_scores.json")
    )
    return GameApp(
        config=config,
        client=client,
        top_scores=LocalTopScores(top_scores_file, size=config.local_top_scores),
    )


async def fetch_ranking(game_app: GameApp) -> list[ScoreRecord]:
    """Query the score server on a worker thread, off the event loop."""
    return await run.io_bound(game_app.ranking)


def tile_style(value: int) -> str:
    color = TILE_COLORS.get(value, DEFAULT_TILE_COLOR)
    text = "transparent" if value == 0 else "#F9F6F2" if value >= 8 else "#776E65"
    size = "24px" if value < 1000 else "18px"
    return (
        f"background-color: {color}; color: {text}; width: 80px; height: 80px;"
        f" border-radius: 3px; font-weight: bold; font-size: {size};"
    )


@ui.page("/")
def index():
    game_app = create_game_app()
    touch_start = {"x": 0.0, "y": 0.0}

    def start_game():
        game_app.start_game(game_app.nickname)
        view.refresh()

    def go_to_menu():
        game_app.go_to_menu()
        view.refresh()

    def restart():
        game_app.handle(Command.RESTART)
        view.refresh()

    def apply(event):
        if event is None:
            return
        if event == Command.MENU:
            go_to_menu()
            return
        game_app.handle(event)
        view.refresh()

    def handle_keyboard(e):
        """Handle keyboard arrow key events"""
        if not e.action.keydown or e.action.repeat:
            return
        if game_app.screen != Screen.GAME:
            return
        apply(event_from_key(e.key.name))

    def handle_touch_start(e):
        touch_start.update(x=e.args["x"], y=e.args["y"])

    def handle_touch_end(e):
        if game_app.screen != Screen.GAME:
            return
        dx = e.args["x"] - touch_start["x"]
        dy = e.args["y"] - touch_start["y"]
        apply(direction_from_swipe(dx, dy, game_app.config.swipe_threshold))

    @ui.refreshable
    def view():
        if game_app.screen == Screen.MENU:
            menu_view()
        else:
            game_view()

    def menu_view():
        ui.label("2048 Game").classes("text-4xl font-bold")
        ui.input("Nickname").bind_value(game_app, "nickname")
        ui.button("Start Game", on_click=start_game)

        ui.label("Ranking").classes("text-2xl")
        ranking_column = ui.column()
        with ranking_column:
            ui.label("Loading...")

        async def load_ranking():
            ranking = await fetch_ranking(game_app)
            ranking_column.clear()
            with ranking_column:
                if not ranking:
                    ui.label("No scores yet")
                for i, record in enumerate(ranking, start=1):
                    ui.label(f"#{i}: {record.nickname} - {record.score}")

        ui.timer(0, load_ranking, once=True)

        ui.label("Top Scores").classes("text-2xl")
        for i, score in enumerate(game_app.top_scores.scores, start=1):
            ui.label(f"#{i}: {score}")

    def game_view():
        session = game_app.session
        ui.label("2048 Game").classes("text-4xl font-bold")
        ui.label(f"Score: {session.score}").classes("text-xl")

        board = ui.grid(columns=4).style(
            "background-color: #BBADA0; border-radius: 6px; padding: 10px;"
        )
        board.on("touchstart", handle_touch_start, js_handler=TOUCH_POINT_JS)
        board.on("touchend", handle_touch_end, js_handler=TOUCH_POINT_JS)
        with board:
            for row in session.grid:
                for value in row:
                    ui.label(str(value) if value else "").classes(
                        "flex items-center justify-center"
                    ).style(tile_style(value))

        if session.over:
            ui.label("Game Over!").classes("text-2xl text-red-600")
        with ui.row():
            ui.button("Restart", on_click=restart)
            ui.button("Main", on_click=go_to_menu)

    view()
    # Register keyboard event handler
    ui.keyboard(on_key=handle_keyboard)


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(title="2048 Game")

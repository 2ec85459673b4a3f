"""Game event logging utilities."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import typer


class GameLogger:
    """
    Records game events to:
    1. stdout (formatted as "[event] key: value") when verbose
    2. JSONL file (one JSON object per line) - only if log_dir is provided

    Usage:
        logger = GameLogger(log_dir="./logs")

        logger.log("move", {"direction": "left", "score_gained": 4, "score": 12})

        # file entry:
        # {"event": "move", "timestamp": "...", "direction": "left", ...}
    """

    def __init__(
        self,
        log_dir: str | Path | None = None,
        session_name: str = "game",
        verbose: bool = False,
    ):
        """
        Args:
            log_dir: Directory for JSONL logs. If None, file logging is disabled.
            session_name: Base name for log files (e.g., "game" -> "game_20260101_001.jsonl")
            verbose: Whether events are also echoed to stdout.
        """
        self.verbose = verbose
        self.log_file = None
        self._file_handle = None

        if log_dir is not None:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)

            self.log_file = self._get_unique_filename(session_name)
            self._file_handle = open(self.log_file, "a")

    def _get_unique_filename(self, base_name: str) -> Path:
        """Find a unique filename by incrementing suffix if file exists."""
        timestamp = datetime.now().strftime("%Y%m%d")
        suffix = 1

        while True:
            filename = self.log_dir / f"{base_name}_{timestamp}_{suffix:03d}.jsonl"
            if not filename.exists():
                return filename
            suffix += 1

    def _format_value(self, value: Any) -> str:
        """Format a value for console output."""
        if isinstance(value, float):
            return f"{value:.2f}"
        return str(value)

    def log(self, event: str, data: dict[str, Any] | None = None) -> None:
        """
        Log one event to the JSONL file, optionally to stdout.

        Args:
            event: Event name (start, move, game_over, restart, ...).
            data: JSON-serializable payload for the event.
        """
        data = data or {}

        if self.verbose:
            typer.echo(f"[{event}]")
            for key, value in data.items():
                typer.echo(f"  {key}: {self._format_value(value)}")

        if self._file_handle is not None:
            entry = {"event": event, "timestamp": datetime.now().isoformat()}
            entry.update(data)

            self._file_handle.write(json.dumps(entry) + "\n")
            self._file_handle.flush()

    def close(self) -> None:
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

"""
Score board server for 2048 sessions.
Appends submitted scores to a JSONL file and serves the ranking.

Usage: python score_server.py [--port PORT] [--data-file FILE]
"""

import argparse
import json
import threading
from pathlib import Path

from flask import Flask, abort, current_app, jsonify, request
from pydantic import ValidationError

from scores import ScoreRecord

MAX_RANKING_LIMIT = 100


class ScoreStore:
    """Append-only JSONL file of score records."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, record: ScoreRecord) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a") as f:
                f.write(record.model_dump_json() + "\n")

    def records(self) -> list[ScoreRecord]:
        if not self.path.exists():
            return []
        records = []
        with self._lock, open(self.path) as f:
            for line in f:
                try:
                    records.append(ScoreRecord(**json.loads(line)))
                except (json.JSONDecodeError, TypeError, ValidationError):
                    continue
        return records

    def top(self, limit: int) -> list[ScoreRecord]:
        # stable sort keeps earlier submissions first among equal scores
        return sorted(self.records(), key=lambda r: r.score, reverse=True)[:limit]


def create_app(data_file: str | Path = "scores.jsonl") -> Flask:
    app = Flask(__name__)
    app.config["SCORE_STORE"] = ScoreStore(data_file)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/scores", methods=["POST"])
    def submit_score():
        """Append one {nickname, score} record."""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            abort(400, "Expected a JSON object")
        try:
            record = ScoreRecord(**payload)
        except ValidationError as e:
            abort(400, f"Invalid score record: {e.errors(include_url=False)}")

        current_app.config["SCORE_STORE"].append(record)
        return jsonify(record.model_dump()), 201

    @app.route("/api/ranking")
    def ranking():
        """Top scores, highest first."""
        limit = request.args.get("limit", 10, type=int)
        limit = max(1, min(limit, MAX_RANKING_LIMIT))

        top = current_app.config["SCORE_STORE"].top(limit)
        return jsonify({"scores": [r.model_dump() for r in top], "limit": limit})

    return app


def main():
    parser = argparse.ArgumentParser(description="2048 Score Board Server")
    parser.add_argument(
        "--port", type=int, default=5051, help="Port to run server on (default: 5051)"
    )
    parser.add_argument(
        "--data-file",
        type=str,
        default="scores.jsonl",
        help="JSONL file holding submitted scores (default: scores.jsonl)",
    )
    args = parser.parse_args()

    app = create_app(args.data_file)

    print("Starting score board server...")
    print(f"  Data file: {Path(args.data_file).absolute()}")
    print(f"  Ranking at http://localhost:{args.port}/api/ranking")

    app.run(host="0.0.0.0", port=args.port, debug=False)


if __name__ == "__main__":
    main()

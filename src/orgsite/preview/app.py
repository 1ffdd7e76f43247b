"""Flask server for previewing a generated site.

Usage:
    python -m orgsite.preview --root public/
"""

from pathlib import Path

from flask import Flask, abort, send_from_directory


def create_app(root: Path) -> Flask:
    app = Flask(__name__)
    root = root.resolve()

    @app.get("/")
    def index():
        return send_from_directory(root, "index.html")

    @app.get("/<path:filename>")
    def page(filename: str):
        if not (root / filename).is_file():
            abort(404)
        return send_from_directory(root, filename)

    return app


def main(root: Path, port: int = 5000) -> None:
    create_app(root).run(host="127.0.0.1", port=port, debug=False)

import argparse
from pathlib import Path

from orgsite.preview import app


def main() -> None:
    parser = argparse.ArgumentParser(description="Preview a generated site")
    parser.add_argument("--root", default="public", help="Generated site directory")
    parser.add_argument("--port", type=int, default=5000)
    args = parser.parse_args()

    root = Path(args.root)
    if not (root / "index.html").is_file():
        raise FileNotFoundError(
            f"No index.html in {root}. Run `python -m orgsite.build -o {root}` first."
        )
    print(f"Serving {root} at http://localhost:{args.port}")
    app.main(root, port=args.port)


main()

"""Build a static blog from org files.

Usage:
    python -m orgsite.build -n "My Site" -u https://example.com/ -f \\
        -o public/ notes.org journal.org
"""

import argparse
from pathlib import Path
import sys
import time

from pydantic import ValidationError

from orgsite.blog.index import SiteIndex
from orgsite.config import SiteConfig, load_config
from orgsite.generate.generator import GenerateStats, generate
from orgsite.generate.output import DirectoryOutput, Output, StdoutOutput


def summary(stats: GenerateStats, elapsed: float) -> str:
    parts = [f"{stats.articles} articles"]
    if stats.drafts:
        parts.append(f"{stats.drafts} drafts")
    parts.append(f"{stats.indices} indices")
    if stats.feeds:
        parts.append(f"{stats.feeds} feed")
    parts.append(f"{stats.statics} static files")
    return f"generate {stats.files} files ({', '.join(parts)}) in {elapsed:.2f}s"


def read_sources(paths: list[Path]) -> list[str]:
    """Read every source up front so a bad file aborts before any output."""
    return [path.read_text(encoding="utf-8") for path in paths]


def build_config(args: argparse.Namespace) -> SiteConfig:
    values = load_config(Path(args.config)) if args.config else {}
    if args.site_name is not None:
        values["name"] = args.site_name
    if args.site_url is not None:
        values["url"] = args.site_url
    if args.feed:
        values["feed"] = True
    if args.draft:
        values["include_draft"] = True
    if args.output is not None:
        values["output"] = args.output
    return SiteConfig.model_validate(values)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Build a static blog from org files")
    parser.add_argument("-n", "--site-name", default=None, help="Site name")
    parser.add_argument(
        "-u", "--site-url", default=None, help="Site URL (used by the atom feed)"
    )
    parser.add_argument("-f", "--feed", action="store_true", help="Generate atom feed")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory (if not specified, write to stdout)",
    )
    parser.add_argument(
        "-d", "--draft", action="store_true", help="Include draft articles"
    )
    parser.add_argument("-c", "--config", default=None, help="Path to site YAML")
    parser.add_argument("files", nargs="+", help="Org files")
    args = parser.parse_args(argv)

    start = time.perf_counter()
    try:
        config = build_config(args)
        sources = read_sources([Path(f) for f in args.files])
    except (OSError, UnicodeDecodeError, ValueError, ValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    index = SiteIndex()
    for text in sources:
        index.load_text(text)

    output: Output
    if config.output is not None:
        output = DirectoryOutput(config.output)
    else:
        output = StdoutOutput()
    stats = generate(index, config, output)

    for message in index.diagnostics:
        print(f"notice: {message}", file=sys.stderr)
    print(summary(stats, time.perf_counter() - start), file=sys.stderr)


if __name__ == "__main__":
    main()

"""Collector for recoverable problems found while building a site."""

from collections.abc import Iterator


class Diagnostics:
    def __init__(self) -> None:
        self.notices: list[str] = []

    def notice(self, message: str) -> None:
        self.notices.append(message)

    def __iter__(self) -> Iterator[str]:
        return iter(self.notices)

    def __len__(self) -> int:
        return len(self.notices)

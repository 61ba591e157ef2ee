from __future__ import annotations

from typing import Protocol

from rich.console import ConsoleRenderable
from rich.text import Text


class ConsoleLike(Protocol):
    """Output surface the pipeline stages write to."""

    def print(self, msg: ConsoleRenderable | str | None = None) -> None: ...

    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def ok(self, msg: str) -> None: ...


def _plain(msg: object) -> str:
    if isinstance(msg, str):
        return Text.from_markup(msg).plain
    return "" if msg is None else str(msg)


class StdoutConsole:
    """Plain-text console fallback.

    Lets the stages run without the CLI console, e.g. when driven from
    another Python program. Rich markup is stripped.
    """

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        print(_plain(msg))

    def info(self, msg: str) -> None:
        print(f"INFO  {_plain(msg)}")

    def warn(self, msg: str) -> None:
        print(f"WARN  {_plain(msg)}")

    def error(self, msg: str) -> None:
        print(f"ERROR {_plain(msg)}")

    def ok(self, msg: str) -> None:
        print(f"OK    {_plain(msg)}")


def coalesce_console(console: ConsoleLike | None) -> ConsoleLike:
    return console if console is not None else StdoutConsole()

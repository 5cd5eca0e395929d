"""Coloured terminal output for the command line front end.

Library modules log through :mod:`logging`; this printer is only for the
human-facing CLI.  Colours are dropped when the stream is not a terminal or
when ``POKERODDS_NO_COLOR=1`` / ``NO_COLOR`` is set.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO

from ..core.models import OddsResult

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"

_FG_RED = "\033[31m"
_FG_GREEN = "\033[32m"
_FG_YELLOW = "\033[33m"
_FG_CYAN = "\033[36m"
_FG_WHITE = "\033[37m"

# level -> (glyph, colour)
_LEVELS: dict[str, tuple[str, str]] = {
    "info": (">", _FG_GREEN),
    "warn": ("!", _FG_YELLOW),
    "error": ("X", _FG_RED),
}

_BAR_WIDTH = 20


def supports_color(stream: TextIO | None = None) -> bool:
    """Heuristic check for ANSI colour support on *stream*."""
    if os.getenv("POKERODDS_NO_COLOR", "").strip().lower() in {"1", "true", "yes"}:
        return False
    if os.getenv("NO_COLOR"):
        return False
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def equity_bar(equity: float, width: int = _BAR_WIDTH) -> str:
    """Fixed-width bar such as ``#########...........`` for a percentage."""
    filled = round(max(0.0, min(100.0, equity)) / 100.0 * width)
    return "#" * filled + "." * (width - filled)


class OddsLogger:
    """Prints ``[Module]``-prefixed lines and odds tables."""

    _MODULE_COLORS: dict[str, str] = {
        "Equity": _FG_YELLOW,
        "Engine": _FG_CYAN,
    }

    def __init__(
        self,
        module: str,
        stream: TextIO | None = None,
        err_stream: TextIO | None = None,
        color: bool | None = None,
    ) -> None:
        self.module = module
        self.stream = stream if stream is not None else sys.stdout
        self.err_stream = err_stream if err_stream is not None else sys.stderr
        self.color = supports_color(self.stream) if color is None else color
        self._prefix_color = self._MODULE_COLORS.get(module, _FG_WHITE)

    def _paint(self, text: str, *codes: str) -> str:
        if not self.color or not codes:
            return text
        return "".join(codes) + text + _RESET

    def _prefix(self) -> str:
        return self._paint(f"[{self.module}]", self._prefix_color, _BOLD)

    def _log(self, level: str, message: str) -> None:
        glyph, colour = _LEVELS[level]
        stream = self.err_stream if level == "error" else self.stream
        print(f"{self._prefix()} {self._paint(glyph, colour)} {message}", file=stream)

    def info(self, message: str) -> None:
        self._log("info", message)

    def warn(self, message: str) -> None:
        self._log("warn", message)

    def error(self, message: str) -> None:
        self._log("error", message)

    def status(self, message: str) -> None:
        """Dimmed line for secondary details."""
        print(f"{self._prefix()} {self._paint(message, _DIM)}", file=self.stream)

    def highlight(self, message: str) -> None:
        print(self._paint(f"[{self.module}] * {message}", self._prefix_color, _BOLD), file=self.stream)

    def result(self, result: OddsResult, title: str | None = None) -> None:
        """Header, run details and one bar per player."""
        mode = "exact" if result.exact else "monte-carlo"
        self.highlight(title or f"{result.game_variant.value} ({mode})")
        self.status(
            f"board={result.board or '-'} iterations={result.iterations} "
            f"time={result.execution_time * 1000:.1f}ms"
        )
        leader = max(equity.equity for equity in result.equities)
        for equity in result.equities:
            bar = equity_bar(equity.equity)
            if equity.equity == leader:
                bar = self._paint(bar, _FG_GREEN, _BOLD)
            self.info(
                f"Player {equity.player_index + 1} {equity.hand}: {equity.equity_percentage():>7} {bar} "
                f"(W {equity.wins} / T {equity.ties} / L {equity.losses})"
            )

"""
Lightweight logger used across the project.
Color output if colorama is present; degrades gracefully if not.
"""
from __future__ import annotations
import sys
from datetime import datetime, timezone
from typing import Literal, Any, TextIO, Optional

Level = Literal["DEBUG","INFO","WARN","ERROR"]

try:
    from colorama import Fore, Style, init as colorama_init
    colorama_init()
    COLORS = {
        "DEBUG": Fore.BLUE,
        "INFO": Fore.GREEN,
        "WARN": Fore.YELLOW,
        "ERROR": Fore.RED
    }
    RESET = Style.RESET_ALL
except Exception:
    COLORS = {"DEBUG":"", "INFO":"", "WARN":"", "ERROR":""}
    RESET = ""

class Logger:
    _order = {"DEBUG":10,"INFO":20,"WARN":30,"ERROR":40}
    def __init__(self, level: Level = "INFO", stream: Optional[TextIO] = None, **context: Any):
        self.threshold = self._order[level]
        self.stream = stream
        self.context = context
        self._root = self

    def set_level(self, level: Level):
        self._root.threshold = self._order.get(level, 20)

    def bind(self, **context: Any) -> "Logger":
        """Child logger that shares the threshold and prefixes every line with ``context``."""
        child = Logger("INFO", self.stream, **{**self.context, **context})
        child._root = self._root
        return child

    def _emit(self, lvl: Level, msg: str, **extra: Any):
        if self._order[lvl] < self._root.threshold:
            return
        ts = datetime.now(timezone.utc).isoformat(timespec="seconds")
        fields = {**self.context, **extra}
        extras = ""
        if fields:
            kv = " ".join(f"{k}={v}" for k,v in fields.items())
            extras = " " + kv
        color = COLORS[lvl]
        out = self.stream or sys.stderr
        out.write(f"{color}{ts} [{lvl}] {msg}{extras}{RESET}\n")

    def debug(self, msg: str, **kw): self._emit("DEBUG", msg, **kw)
    def info(self, msg: str, **kw): self._emit("INFO", msg, **kw)
    def warn(self, msg: str, **kw): self._emit("WARN", msg, **kw)
    def error(self, msg: str, **kw): self._emit("ERROR", msg, **kw)

logger = Logger("WARN")

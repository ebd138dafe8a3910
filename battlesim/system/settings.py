from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional
from battlesim.core.logging import logger

SETTINGS_FILENAME = ".battlesim_settings.json"
DEFAULT_THINK_DELAY = 2.0

@dataclass
class SettingsData:
    think_delay: float = DEFAULT_THINK_DELAY  # seconds the opponent "thinks" before acting
    log_level: str = "WARN"                   # DEBUG / INFO / WARN / ERROR
    seed: Optional[int] = None                # seeds the opponent's move selector
    debug: bool = False                       # Verbose battle/debug prints

    def normalize(self):
        try:
            self.think_delay = float(self.think_delay)
        except (TypeError, ValueError):
            self.think_delay = DEFAULT_THINK_DELAY
        if self.think_delay < 0:
            self.think_delay = DEFAULT_THINK_DELAY
        if self.log_level not in {"DEBUG","INFO","WARN","ERROR"}:
            self.log_level = "WARN"
        if self.seed is not None and not isinstance(self.seed, int):
            self.seed = None
        self.debug = bool(self.debug)

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Unknown keys are dropped so older files keep loading
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2))
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def apply(self):
        """Push settings into process-wide collaborators (currently the logger level)."""
        lvl: str = self.data.log_level
        if lvl in {"DEBUG","INFO","WARN","ERROR"}:
            logger.set_level(lvl)  # type: ignore[arg-type]
        self._notify()

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)

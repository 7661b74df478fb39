import json
from dataclasses import asdict, fields
from pathlib import Path

from .models import ResetSettings


class ConfigStore:
    def __init__(self, config_path: Path):
        self.config_path = config_path

    def load(self) -> ResetSettings:
        if not self.config_path.exists():
            return ResetSettings()
        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
            known = {f.name for f in fields(ResetSettings)}
            return ResetSettings(**{k: v for k, v in data.items() if k in known})
        except (OSError, ValueError, TypeError, AttributeError):
            # If config is corrupt, fall back safely
            return ResetSettings()

    def save(self, settings: ResetSettings) -> None:
        self.config_path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")

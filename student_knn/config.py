import json
import os
from dataclasses import dataclass, fields, asdict, replace
from typing import Optional

CONFIG_ENV_VAR = "STUDENT_KNN_CONFIG"


@dataclass(frozen=True)
class Settings:
    n_samples: int = 200
    train_ratio: float = 0.8
    k: int = 5
    seed: Optional[int] = None
    csv_path: str = "students.csv"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self):
        return asdict(self)


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from a JSON file.

    Args:
        config_path: Path to the JSON file. Falls back to $STUDENT_KNN_CONFIG;
            with neither set, defaults are returned.

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If the config file does not exist
        json.JSONDecodeError: If the config file is not valid JSON
        ValueError: If the file has keys Settings does not know
    """
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not config_path:
        return Settings()

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        raw = json.load(f)

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {unknown}")
    return Settings(**raw)


def save_config(settings: Settings, config_path: str) -> None:
    parent = os.path.dirname(config_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(config_path, 'w') as f:
        json.dump(settings.to_dict(), f, indent=2)

"""Application configuration.

Settings come from a YAML file chosen in this order: an explicit path, the
``LEADERBOARD_CONFIG`` environment variable, ``leaderboard.yaml`` in the
working directory.  Without any of those the defaults below apply.

Example::

    standings_path: data/final_standings.csv
    agent_config_dir: agent_configs
    agent_config_map:
      gpt-4o-agent: gpt4o.yaml
    log_level: DEBUG
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

CONFIG_ENV_VAR = "LEADERBOARD_CONFIG"
DEFAULT_CONFIG_FILE = "leaderboard.yaml"


@dataclass
class AppConfig:
    """Resolved settings for one app session.

    Attributes
    ----------
    standings_path : str
        CSV file with the tournament standings.
    agent_config_dir : str
        Directory that agent YAML sidecars are resolved against.
    agent_config_map : dict[str, str]
        Player name -> sidecar filename.  Players absent from the map have
        no enrichment.
    preferences_path : str | None
        JSON file for theme / pinned-player preferences.  The file belongs to
        the server process, so every browser session shares it; set None for
        per-session preferences kept in memory only.
    log_level : str
        Root logging level name.
    page_title : str
        Browser tab and header title.
    """

    standings_path: str = "data/final_standings.csv"
    agent_config_dir: str = "agent_configs"
    agent_config_map: dict[str, str] = field(default_factory=dict)
    preferences_path: str | None = "~/.leaderboard_viewer/preferences.json"
    log_level: str = "INFO"
    page_title: str = "Tournament Leaderboard"


def _config_from_mapping(raw: object, source: str) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"{source}: configuration must be a mapping")

    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"{source}: unknown configuration keys {unknown}")

    mapping = raw.get("agent_config_map")
    if mapping is not None and not isinstance(mapping, dict):
        raise ValueError(f"{source}: agent_config_map must be a mapping")

    cfg = AppConfig(**raw)
    cfg.agent_config_map = {str(k): str(v) for k, v in (mapping or {}).items()}
    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load the app configuration (see module docstring for lookup order)."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if path is None:
        if not Path(DEFAULT_CONFIG_FILE).exists():
            return AppConfig()
        path = DEFAULT_CONFIG_FILE

    config_path = Path(path)
    with config_path.open(encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    return _config_from_mapping(raw, str(config_path))

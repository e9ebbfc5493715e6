"""
Configuration for the layered SEO store.

Values are read from the environment when not passed explicitly, so the
same settings object works in the app (after ``load_dotenv``) and in tests.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return (os.getenv(name, default) or "").strip() == "1"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class SeoStoreSettings:
    """
    Settings for the configuration provider.

    Attributes:
        store_dir: Explicit config directory (``SEO_STORE_DIR``)
        config_json: JSON blob layer (``SEO_CONFIG_JSON``)
        edge_runtime: Skip disk and DB layers (``SEO_RUNTIME=edge``)
        db_override_enabled: Read DB rows at all (``SEO_DB_OVERRIDE``, default "1")
        db_cache_ms: DB patch TTL in milliseconds (``SEO_DB_CACHE_MS``, 0 disables)
        disk_cache_ms: Disk snapshot reuse window in milliseconds
        key_global/key_match/key_league/key_player: Preferred DB record keys
        cwd: Base directory for relative paths (defaults to the process cwd)
    """
    store_dir: Optional[str] = None
    config_json: Optional[str] = None
    edge_runtime: Optional[bool] = None
    db_override_enabled: Optional[bool] = None
    db_cache_ms: Optional[int] = None
    disk_cache_ms: int = 1000
    key_global: Optional[str] = None
    key_match: Optional[str] = None
    key_league: Optional[str] = None
    key_player: Optional[str] = None
    cwd: Optional[str] = field(default=None)

    def __post_init__(self):
        if self.store_dir is None:
            self.store_dir = (os.getenv("SEO_STORE_DIR") or "").strip() or None
        if self.config_json is None:
            self.config_json = os.getenv("SEO_CONFIG_JSON") or None
        if self.edge_runtime is None:
            self.edge_runtime = (os.getenv("SEO_RUNTIME") or "").strip().lower() == "edge"
        if self.db_override_enabled is None:
            self.db_override_enabled = _env_flag("SEO_DB_OVERRIDE", "1")
        if self.db_cache_ms is None:
            self.db_cache_ms = _env_int("SEO_DB_CACHE_MS", 500)
        if self.key_global is None:
            self.key_global = os.getenv("SEO_DB_KEY_GLOBAL", "livesoccerr")
        if self.key_match is None:
            self.key_match = os.getenv("SEO_DB_KEY_MATCH", "livesoccerr_match")
        if self.key_league is None:
            self.key_league = os.getenv("SEO_DB_KEY_LEAGUE", "livesoccerr_league")
        if self.key_player is None:
            self.key_player = os.getenv("SEO_DB_KEY_PLAYER", "livesoccerr_player")
        if self.cwd is None:
            self.cwd = os.getcwd()

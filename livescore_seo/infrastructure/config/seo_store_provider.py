"""
Layered SEO Configuration Provider

Produces the merged ``SeoStore`` snapshot consumed by the resolver and the
builders. Layers, lowest to highest priority:

1. compiled defaults (``SeoStore()``)
2. disk JSON files (store files, then legal page files)
3. ``SEO_CONFIG_JSON`` environment blob
4. database rows (global, match, league, player)

A runtime store installed with ``swap()`` short-circuits all of the above.
In edge mode the disk and database layers are skipped outright.

Each source has its own cache: disk snapshots are reused while the watched
files' signature is unchanged and the short disk window has not elapsed; the
DB patch is reused within its TTL and, after that, for as long as the rows'
``updated_at`` signature is unchanged.
"""

import asyncio
import json
import logging
import os
import threading
import time
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from livescore_seo.domain.entities.seo_store import SeoStore
from livescore_seo.domain.exceptions import InvalidRuntimeStoreError
from livescore_seo.domain.repositories.repositories import SeoSettingsRecord, SeoSettingsRepository
from livescore_seo.infrastructure.cache.snapshot_cache import SnapshotCache
from livescore_seo.infrastructure.config.disk_layer import DiskConfigLayer
from livescore_seo.infrastructure.config.merge import deep_merge
from livescore_seo.infrastructure.config.settings import SeoStoreSettings
from livescore_seo.utils.seo_utils import normalize_asset_path, unique_non_empty

logger = logging.getLogger(__name__)


# Asset fields in a DB patch that must be root-relative or absolute
DB_ASSET_PATHS = (
    ("brand", "logoUrl"),
    ("brand", "defaultOgImage"),
    ("brand", "faviconUrl"),
    ("home", "ogImage"),
    ("match", "og", "fallbackImage"),
    ("match", "og", "bannerPath"),
    ("league", "og", "fallbackImage"),
    ("player", "og", "fallbackImage"),
)

# Built-in key each record kind was first saved under
BUILTIN_DB_KEYS = {
    "global": "livesoccerr",
    "match": "livesoccerr_match",
    "league": "livesoccerr_league",
    "player": "livesoccerr_player",
}

_DB_CACHE_KEY = "db"
_EDGE_CACHE_KEY = "edge"


def normalize_patch_assets(patch: dict) -> dict:
    """Normalize known asset paths in ``patch`` in place and return it."""
    for path in DB_ASSET_PATHS:
        node: Any = patch
        for segment in path[:-1]:
            node = node.get(segment) if isinstance(node, dict) else None
        if isinstance(node, dict) and path[-1] in node:
            node[path[-1]] = normalize_asset_path(node[path[-1]])
    return patch


class SeoConfigProvider:
    """
    Owns every configuration layer and its cache.

    One provider is created per process and passed to the resolver; there is
    no ambient global state.

    Args:
        settings: Provider settings (environment-backed by default)
        repository: DB collaborator; None disables the DB layer
        clock: Monotonic clock for cache windows
        stat: ``os.stat`` replacement for disk signatures
    """

    def __init__(
        self,
        settings: Optional[SeoStoreSettings] = None,
        repository: Optional[SeoSettingsRepository] = None,
        clock: Callable[[], float] = time.monotonic,
        stat: Callable[[str], os.stat_result] = os.stat,
    ):
        self.settings = settings or SeoStoreSettings()
        self.repository = repository
        self.disk = DiskConfigLayer(self.settings.store_dir, self.settings.cwd, stat=stat)

        self._default_store = SeoStore()
        self._defaults_layer = self._default_store.to_layer()
        self._disk_cache: SnapshotCache[SeoStore] = SnapshotCache(self.settings.disk_cache_ms / 1000.0, clock)
        self._db_cache: SnapshotCache[Optional[dict]] = SnapshotCache(max(self.settings.db_cache_ms, 0) / 1000.0, clock)

        self._runtime_store: Optional[SeoStore] = None
        self._swap_lock = threading.Lock()
        # (base snapshot, db patch, merged) from the last async snapshot
        self._overlay_memo: Optional[Tuple[SeoStore, dict, SeoStore]] = None

    # ------------------------------------------------------------------
    # Runtime layer
    # ------------------------------------------------------------------

    @property
    def runtime_store(self) -> Optional[SeoStore]:
        return self._runtime_store

    def swap(self, store: Union[SeoStore, Mapping[str, Any], None]) -> Optional[SeoStore]:
        """
        Install (or with None, clear) the runtime store.

        A mapping is merged onto the compiled defaults and validated first.

        Returns:
            The previously installed runtime store

        Raises:
            InvalidRuntimeStoreError: ``store`` does not validate as a store
        """
        if store is not None and not isinstance(store, SeoStore):
            if not isinstance(store, Mapping):
                raise InvalidRuntimeStoreError(f"Expected a store mapping, got {type(store).__name__}")
            try:
                store = SeoStore.model_validate(deep_merge(self._defaults_layer, store))
            except ValidationError as e:
                raise InvalidRuntimeStoreError(str(e)) from e

        with self._swap_lock:
            previous = self._runtime_store
            self._runtime_store = store
        logger.info(f"Runtime SEO store {'installed' if store is not None else 'cleared'}")
        return previous

    def invalidate(self) -> None:
        """Drop cached disk snapshots and the cached DB patch."""
        self._disk_cache.invalidate()
        self._db_cache.invalidate()
        self._overlay_memo = None

    # ------------------------------------------------------------------
    # Layer helpers
    # ------------------------------------------------------------------

    def _env_layer(self) -> Optional[dict]:
        raw = self.settings.config_json
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring SEO_CONFIG_JSON: invalid JSON ({e})")
            return None
        if not isinstance(parsed, dict):
            logger.warning("Ignoring SEO_CONFIG_JSON: top-level value must be an object")
            return None
        return parsed

    def _merge_validated(self, layers: Sequence[Tuple[str, Optional[dict]]]) -> SeoStore:
        """
        Merge ``layers`` in order on top of the compiled defaults.

        A layer that makes the store invalid is discarded and logged; the
        layers below it stay in force.
        """
        merged = self._defaults_layer
        store = self._default_store
        for name, patch in layers:
            if not patch:
                continue
            candidate = deep_merge(merged, patch)
            try:
                candidate_store = SeoStore.model_validate(candidate)
            except ValidationError as e:
                logger.warning(f"Discarding SEO layer '{name}': {e.error_count()} validation error(s)")
                continue
            merged, store = candidate, candidate_store
        return store

    # ------------------------------------------------------------------
    # Sync snapshot (defaults + disk + env)
    # ------------------------------------------------------------------

    def get_sync_snapshot(self) -> SeoStore:
        """
        Get the store from layers that need no network I/O.

        Returns:
            Runtime store if installed, else defaults + disk + env
        """
        runtime = self._runtime_store
        if runtime is not None:
            return runtime

        env_signature = f"env:{self.settings.config_json or ''}"

        if self.settings.edge_runtime:
            cached = self._disk_cache.get(_EDGE_CACHE_KEY, env_signature)
            if cached is not None:
                return cached.value
            store = self._merge_validated([("env", self._env_layer())])
            self._disk_cache.set(_EDGE_CACHE_KEY, store, env_signature)
            return store

        directory = self.disk.resolve_dir()
        signature = f"{self.disk.signature(directory)}|{env_signature}"

        cached = self._disk_cache.get(directory, signature)
        if cached is not None:
            return cached.value

        store = self._merge_validated([
            ("disk", self.disk.load_store_patch(directory)),
            ("legal-pages", self.disk.load_legal_patch(directory)),
            ("env", self._env_layer()),
        ])
        self._disk_cache.set(directory, store, signature)
        logger.debug(f"Rebuilt SEO store snapshot from {directory}")
        return store

    # ------------------------------------------------------------------
    # DB layer
    # ------------------------------------------------------------------

    def record_keys(self) -> List[Tuple[str, List[str]]]:
        """Lookup keys per record kind: preferred key, then legacy fallbacks."""
        preferred = {
            "global": self.settings.key_global,
            "match": self.settings.key_match,
            "league": self.settings.key_league,
            "player": self.settings.key_player,
        }
        return [
            (kind, unique_non_empty([preferred[kind], kind, "default", BUILTIN_DB_KEYS[kind]]))
            for kind in SeoSettingsRepository.RECORD_KINDS
        ]

    @staticmethod
    def _records_signature(kinds: Sequence[str], records: Sequence[Optional[SeoSettingsRecord]]) -> str:
        parts = []
        for kind, record in zip(kinds, records):
            if record is None:
                parts.append(f"{kind}:none")
            else:
                stamp = record.updated_at.isoformat() if record.updated_at else "none"
                parts.append(f"{record.key}:{stamp}")
        return "|".join(parts)

    def db_layer_enabled(self) -> bool:
        return (
            self.repository is not None
            and bool(self.settings.db_override_enabled)
            and not self.settings.edge_runtime
        )

    async def load_db_patch(self) -> Optional[dict]:
        """
        Load the DB patch (global, match, league, player merged at the root).

        Never raises: a database failure is logged and treated as "no patch".
        """
        if not self.db_layer_enabled():
            return None

        cached = self._db_cache.get(_DB_CACHE_KEY)
        if cached is not None:
            return cached.value

        lookups = self.record_keys()
        kinds = [kind for kind, _keys in lookups]
        loop = asyncio.get_running_loop()
        try:
            records = await asyncio.gather(*(
                loop.run_in_executor(None, self.repository.find_first_by_keys, kind, keys)
                for kind, keys in lookups
            ))
        except Exception as e:
            logger.error(f"Failed to load SEO DB override patch: {e}", exc_info=True)
            self._db_cache.set(_DB_CACHE_KEY, None, "error")
            return None

        signature = self._records_signature(kinds, records)
        previous = self._db_cache.peek(_DB_CACHE_KEY)
        if previous is not None and previous.signature == signature:
            self._db_cache.set(_DB_CACHE_KEY, previous.value, signature)
            return previous.value

        patch: dict = {}
        for kind, record in zip(kinds, records):
            if record is None:
                continue
            if not isinstance(record.data, dict):
                logger.warning(f"Ignoring SEO {kind} record '{record.key}': data is not an object")
                continue
            patch = deep_merge(patch, record.data)

        final_patch = normalize_patch_assets(patch) if patch else None
        self._db_cache.set(_DB_CACHE_KEY, final_patch, signature)
        return final_patch

    # ------------------------------------------------------------------
    # Async snapshot (sync snapshot + DB)
    # ------------------------------------------------------------------

    async def get_async_snapshot(self) -> SeoStore:
        """
        Get the full store: the sync snapshot with the DB patch on top.

        Returns:
            Runtime store if installed, else defaults + disk + env + DB
        """
        runtime = self._runtime_store
        if runtime is not None:
            return runtime

        base = self.get_sync_snapshot()
        patch = await self.load_db_patch()
        if not patch:
            return base

        memo = self._overlay_memo
        if memo is not None and memo[0] is base and memo[1] is patch:
            return memo[2]

        try:
            merged = SeoStore.model_validate(deep_merge(base.to_layer(), patch))
        except ValidationError as e:
            logger.warning(f"Discarding SEO layer 'db': {e.error_count()} validation error(s)")
            merged = base

        self._overlay_memo = (base, patch, merged)
        return merged

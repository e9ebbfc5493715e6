"""
Disk Configuration Layer

Reads the optional JSON files admins drop into the SEO config directory.
Every file is independently optional: a missing, empty or malformed file
contributes nothing.
"""

import json
import os
import logging
from typing import Callable, Dict, List, Optional

from livescore_seo.domain.exceptions import ConfigLayerError
from livescore_seo.infrastructure.config.merge import deep_merge, merge_layers

logger = logging.getLogger(__name__)


# Deep-merged in this order
STORE_FILES = (
    "seo-store.global.json",
    "seo-store.match.json",
    "seo-store.league.json",
    "seo-store.player.json",
)

# Legal page files patch ``pages.<key>`` with their ``seo`` object only
LEGAL_FILES = (
    ("seo-page.privacy-policy.json", "privacyPolicy"),
    ("seo-page.terms-of-service.json", "termsOfService"),
    ("seo-page.contact.json", "contact"),
)


def read_json_file(path: str) -> Optional[dict]:
    """
    Read a JSON object from ``path``.

    Returns:
        The parsed object, or None when the file is absent or empty

    Raises:
        ConfigLayerError: The file exists but is not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = fh.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ConfigLayerError(path, f"unreadable: {e}") from e

    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigLayerError(path, f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigLayerError(path, "top-level value must be an object")
    return data


class DiskConfigLayer:
    """
    Locates the config directory and loads its store and legal-page files.

    Args:
        store_dir: Explicit directory (absolute, or relative to ``cwd``)
        cwd: Base directory for the built-in candidates
        stat: ``os.stat``-compatible function, injectable for tests
    """

    def __init__(
        self,
        store_dir: Optional[str],
        cwd: str,
        stat: Callable[[str], os.stat_result] = os.stat,
    ):
        self.store_dir = store_dir
        self.cwd = cwd
        self._stat = stat

    def candidate_dirs(self) -> List[str]:
        """Directories searched in priority order."""
        dirs = []
        if self.store_dir:
            explicit = self.store_dir
            if not os.path.isabs(explicit):
                explicit = os.path.join(self.cwd, explicit)
            dirs.append(explicit)
        dirs.extend([
            os.path.join(self.cwd, "seo-config"),
            os.path.join(self.cwd, "seo"),
            self.cwd,
        ])
        return dirs

    def _watched_names(self) -> List[str]:
        return list(STORE_FILES) + [name for name, _key in LEGAL_FILES]

    def resolve_dir(self) -> str:
        """First candidate holding any watched file, else the configured default."""
        names = self._watched_names()
        for directory in self.candidate_dirs():
            if not os.path.isdir(directory):
                continue
            if any(os.path.exists(os.path.join(directory, name)) for name in names):
                return directory

        if self.store_dir:
            return self.candidate_dirs()[0]
        return os.path.join(self.cwd, "seo-config")

    def watched_paths(self, directory: str) -> List[str]:
        return [os.path.join(directory, name) for name in self._watched_names()]

    def signature(self, directory: str) -> str:
        """Cheap fingerprint: ``path:size:mtime`` (or ``path:missing``) per watched file."""
        parts = []
        for path in self.watched_paths(directory):
            try:
                st = self._stat(path)
                parts.append(f"{path}:{st.st_size}:{st.st_mtime_ns}")
            except OSError:
                parts.append(f"{path}:missing")
        return "|".join(parts)

    def _read_optional(self, path: str) -> Optional[dict]:
        try:
            return read_json_file(path)
        except ConfigLayerError as e:
            logger.warning(f"Ignoring SEO config file {e.layer}: {e.reason}")
            return None

    def load_store_patch(self, directory: str) -> Dict:
        """Deep-merge all store files found in ``directory``."""
        layers = [
            (name, self._read_optional(os.path.join(directory, name)))
            for name in STORE_FILES
        ]
        return merge_layers(layers)

    def load_legal_patch(self, directory: str) -> Dict:
        """Build a ``{"pages": {...}}`` patch from the legal page files."""
        pages: Dict[str, dict] = {}
        for name, key in LEGAL_FILES:
            doc = self._read_optional(os.path.join(directory, name))
            seo = doc.get("seo") if doc else None
            if isinstance(seo, dict):
                pages[key] = deep_merge(pages.get(key, {}), seo)
        return {"pages": pages} if pages else {}

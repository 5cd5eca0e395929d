"""Central loader for ``config.yaml``.

Settings are addressed by dotted keys (``engine.iterations``).  A
``POKERODDS_*`` environment variable always beats the YAML file, which in
turn beats the default passed by the caller::

    from pokerodds.utils.odds_config import cfg

    cfg.get_int("engine.iterations", 10_000)
    cfg.get_str("engine.variant", "texas_holdem")

``engine.iterations`` maps to ``POKERODDS_ENGINE_ITERATIONS``.  The file is
located through ``POKERODDS_CONFIG_FILE`` or by looking for ``config.yaml``
next to the package, and is parsed once, on first access.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

_log = logging.getLogger("pokerodds.config")

ENV_PREFIX = "POKERODDS_"
CONFIG_FILENAME = "config.yaml"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})

T = TypeVar("T")


def default_config_path() -> Path:
    override = os.getenv(f"{ENV_PREFIX}CONFIG_FILE", "").strip()
    if override:
        return Path(override)
    package_dir = Path(__file__).resolve().parents[1]
    for directory in (package_dir, package_dir.parent):
        if (directory / CONFIG_FILENAME).is_file():
            return directory / CONFIG_FILENAME
    return package_dir.parent / CONFIG_FILENAME


def env_name(key: str) -> str:
    """``engine.time_budget`` -> ``POKERODDS_ENGINE_TIME_BUDGET``."""
    return ENV_PREFIX + key.replace(".", "_").upper()


def _parse_bool(raw: Any) -> bool | None:
    if isinstance(raw, bool):
        return raw
    token = str(raw).strip().lower()
    if token in _TRUE:
        return True
    if token in _FALSE:
        return False
    return None


class OddsConfig:
    """Dotted-key settings with ``env > yaml > default`` priority."""

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._tree: dict[str, Any] | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else default_config_path()

    # ── Loading ───────────────────────────────────────────────────

    def _read(self) -> dict[str, Any]:
        path = self.path
        if not path.is_file():
            _log.debug("No config file at %s, using defaults", path)
            return {}
        try:
            tree = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            _log.warning("Could not read %s (%s), using defaults", path, exc)
            return {}
        if not isinstance(tree, dict):
            _log.warning("Ignoring %s: top level is not a mapping", path)
            return {}
        _log.debug("Loaded config from %s", path)
        return tree

    def _settings(self) -> dict[str, Any]:
        tree = self._tree
        if tree is None:
            with self._lock:
                if self._tree is None:
                    self._tree = self._read()
                tree = self._tree
        return tree

    def reload(self) -> None:
        """Discard the cached tree and parse the file again."""
        with self._lock:
            self._tree = self._read()

    # ── Lookup ────────────────────────────────────────────────────

    def _from_yaml(self, key: str) -> Any:
        node: Any = self._settings()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def _candidates(self, key: str) -> list[tuple[str, Any]]:
        """Raw values for *key* in priority order, each tagged with its source."""
        found: list[tuple[str, Any]] = []
        env_value = os.getenv(env_name(key), "").strip()
        if env_value:
            found.append((env_name(key), env_value))
        yaml_value = self._from_yaml(key)
        if yaml_value is not None:
            found.append((f"{key} in {CONFIG_FILENAME}", yaml_value))
        return found

    def _coerce(self, key: str, cast: Callable[[Any], T], default: T) -> T:
        for source, raw in self._candidates(key):
            try:
                return cast(raw)
            except (TypeError, ValueError):
                _log.warning("Ignoring unusable value %s=%r", source, raw)
        return default

    # ── Typed getters ─────────────────────────────────────────────

    def get_str(self, key: str, default: str = "") -> str:
        return self._coerce(key, str, default)

    def get_int(self, key: str, default: int = 0) -> int:
        return self._coerce(key, int, default)

    def get_float(self, key: str, default: float = 0.0) -> float:
        return self._coerce(key, float, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        for source, raw in self._candidates(key):
            value = _parse_bool(raw)
            if value is not None:
                return value
            _log.warning("Ignoring non-boolean %s=%r", source, raw)
        return default

    def get_dict(self, key: str) -> dict[str, Any]:
        section = self._from_yaml(key)
        return dict(section) if isinstance(section, dict) else {}

    def __repr__(self) -> str:
        return f"<OddsConfig path={str(self.path)!r} sections={sorted(self._settings())}>"


cfg = OddsConfig()

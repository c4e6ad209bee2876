"""
devserve configuration management (YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from devserve.core.exceptions import ConfigError
from devserve.core.schemas import validate_payload
from devserve.core.serve.models import ServeConfig
from devserve.core.utils.io import read_yaml
from devserve.core.utils.merge import deep_merge
from devserve.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "DEVSERVE_"
PROJECT_CONFIG_FILENAMES = ("devserve.yaml", "devserve.yml")
CONFIG_SCHEMA = "config.schema.yaml"


class ConfigManager:
    """Load, merge, and validate devserve configuration.

    Configuration sources (highest to lowest priority):
    1. Explicit overrides passed to :meth:`load_config` (CLI flags)
    2. Environment variables: DEVSERVE_* (``__`` separates nested keys)
    3. Project config: ``config_path`` or <project_root>/devserve.yaml
    4. Bundled defaults: devserve.data/config/defaults.yaml
    """

    def __init__(
        self,
        project_root: Optional[Path] = None,
        *,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.project_root = Path(project_root or Path.cwd()).resolve()
        self.config_path = Path(config_path) if config_path is not None else None
        self.environ = environ if environ is not None else os.environ
        self.defaults_path = get_data_path("config", "defaults.yaml")

    # ---------- files ----------

    def project_config_file(self) -> Optional[Path]:
        """Return the project config file in effect, if any."""
        if self.config_path is not None:
            path = self.config_path
            if not path.is_absolute():
                path = self.project_root / path
            if not path.exists():
                raise ConfigError(
                    f"Config file not found: {path}",
                    context={"config_path": str(path)},
                )
            return path
        for name in PROJECT_CONFIG_FILENAMES:
            candidate = self.project_root / name
            if candidate.exists():
                return candidate
        return None

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {path}",
                context={"path": str(path), "type": type(data).__name__},
            )
        return data

    # ---------- environment ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[str]:
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            if strict:
                raise ConfigError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                    context={"key": f"{ENV_PREFIX}{raw}"},
                )
            return []
        return [seg.lower() for seg in segs]

    def iter_env_overrides(self, *, strict: bool = False) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                if strict:
                    raise ConfigError(f"Malformed {ENV_PREFIX}* key", context={"key": key})
                continue
            path = self._parse_env_key(raw, strict=strict)
            if not path:
                continue
            yield path, self._coerce_type(self.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        for path, typed_value in self.iter_env_overrides(strict=strict):
            logger.debug("config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)

    # ---------- loading ----------

    def load_config(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        *,
        validate: bool = True,
    ) -> Dict[str, Any]:
        """Return the merged configuration mapping.

        ``overrides`` are applied last; ``None`` values in it are ignored so
        unset CLI flags do not mask lower layers.
        """
        cfg = self.load_yaml(self.defaults_path)

        project_file = self.project_config_file()
        if project_file is not None:
            logger.debug("loading project config %s", project_file)
            cfg = deep_merge(cfg, self.load_yaml(project_file))

        self.apply_env_overrides(cfg, strict=validate)

        if overrides:
            cfg = deep_merge(cfg, {k: v for k, v in overrides.items() if v is not None})

        if validate:
            validate_payload(cfg, CONFIG_SCHEMA)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('logging.level')
            'WARNING'
            >>> manager.get('nonexistent.key', 'fallback')
            'fallback'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


def to_serve_config(cfg: Mapping[str, Any]) -> ServeConfig:
    """Convert a merged configuration mapping into a ServeConfig.

    The ``logging`` section configures the process, not the server, and is
    left out.
    """
    return ServeConfig.from_raw({k: v for k, v in cfg.items() if k != "logging"})


__all__ = ["ConfigManager", "ENV_PREFIX", "PROJECT_CONFIG_FILENAMES", "to_serve_config"]

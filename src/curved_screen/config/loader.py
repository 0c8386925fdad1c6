# curved_screen/config/loader.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Set, Optional

import yaml

from .errors import ConfigError, IncludeCycleError


_VAR_RE = re.compile(r"\$\{([^}]+)\}")  # ${name} or ${ENV:HOME}

# Packaged base YAML, reachable from configs as "base/<file>.yaml"
PACKAGED_YAML_BASE_DIR = str(Path(__file__).resolve().parent.parent / "yaml" / "base")


def deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge dict b into dict a and return merged dict (non-destructive).
    - dict + dict -> recursively merge
    - list + list -> replace
    - scalar -> replace
    """
    out = dict(a)
    for k, v in b.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _read_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read YAML '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML must be a mapping/dict: {path}")
    return data


def _lookup(key: str, params: Dict[str, Any], s: str) -> Any:
    if key.startswith("ENV:"):
        env_key = key.split(":", 1)[1].strip()
        return os.environ.get(env_key, "")
    if key not in params:
        raise ConfigError(f"Unknown parameter '{key}' in string: {s}")
    return params[key]


def _resolve_string(s: str, params: Dict[str, Any]) -> Any:
    """
    Resolve ${var} substitutions.
    - If the *entire* string is exactly one variable (e.g. "${curve}"),
      return the underlying value with its original type (float/int/bool/etc).
    - If the variable appears inside a larger string, coerce to str and substitute.
    """
    s = s.strip()

    m = re.fullmatch(r"\$\{([^}]+)\}", s)
    if m:
        return _lookup(m.group(1).strip(), params, s)

    return _VAR_RE.sub(lambda match: str(_lookup(match.group(1).strip(), params, s)), s)


def _resolve_params(obj: Any, params: Dict[str, Any]) -> Any:
    if isinstance(obj, str):
        return _resolve_string(obj, params) if "${" in obj else obj
    if isinstance(obj, list):
        return [_resolve_params(x, params) for x in obj]
    if isinstance(obj, dict):
        return {k: _resolve_params(v, params) for k, v in obj.items()}
    return obj


def _norm_include_path(base_dir: str, inc: str, yaml_base_dir: Optional[str]) -> str:
    """
    - Absolute paths are used as given
    - 'base/...' resolves under yaml_base_dir
    - anything else is relative to the including file's directory
    """
    inc = inc.strip()
    if os.path.isabs(inc):
        return inc

    if yaml_base_dir and (inc.startswith("base/") or inc.startswith("base\\")):
        return os.path.join(yaml_base_dir, inc[len("base/"):])

    return os.path.normpath(os.path.join(base_dir, inc))


@dataclass(frozen=True)
class LoadedConfig:
    path: str
    data: Dict[str, Any]

    @property
    def screen(self) -> Dict[str, Any]:
        return self.data.get("screen", {}) or {}

    @property
    def material(self) -> Dict[str, Any]:
        return self.data.get("material", {}) or {}

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.data.get("metadata", {}) or {}

    @property
    def global_settings(self) -> Dict[str, Any]:
        return self.data.get("global_settings", {}) or {}

    @property
    def output_files(self) -> Dict[str, Any]:
        return self.data.get("output_files", {}) or {}

    @property
    def workflow(self):
        return self.data.get("workflow", []) or []


def load_config(
    config_path: str,
    *,
    yaml_base_dir: Optional[str] = PACKAGED_YAML_BASE_DIR,
    validate: bool = True,
) -> LoadedConfig:
    """
    Load a config file with:
    - include processing
    - deep merging
    - parameter resolution

    yaml_base_dir: filesystem dir that "base/..." includes resolve against,
                  the packaged curved_screen/yaml/base by default
    """
    config_path = os.path.abspath(config_path)

    visited: Set[str] = set()

    def load_one(path: str) -> Dict[str, Any]:
        abspath = os.path.abspath(path)
        if abspath in visited:
            raise IncludeCycleError(f"Include cycle detected at: {abspath}")
        visited.add(abspath)

        data = _read_yaml(abspath)

        includes = data.get("include", []) or []
        if not isinstance(includes, list):
            raise ConfigError(f"'include' must be a list in {abspath}")

        # Load includes first
        acc: Dict[str, Any] = {}
        for inc in includes:
            if not isinstance(inc, str):
                raise ConfigError(f"include entries must be strings: {abspath}")
            inc_path = _norm_include_path(os.path.dirname(abspath), inc, yaml_base_dir)
            acc = deep_merge(acc, load_one(inc_path))

        # Then merge this file over included base
        data_no_include = dict(data)
        data_no_include.pop("include", None)

        return deep_merge(acc, data_no_include)

    merged = load_one(config_path)

    # Params: includes may define params, the project file can override
    params = merged.get("params", {}) or {}
    if not isinstance(params, dict):
        raise ConfigError("'params' must be a mapping/dict")

    merged = _resolve_params(merged, params)

    if validate:
        _validate_minimal(merged, config_path)

    return LoadedConfig(path=config_path, data=merged)


def _validate_minimal(cfg: Dict[str, Any], path: str) -> None:
    if "workflow" not in cfg:
        raise ConfigError(f"Missing required top-level key 'workflow' in {path}")

    if not isinstance(cfg["workflow"], list):
        raise ConfigError(f"'workflow' must be a list in {path}")

    for key in ("screen", "material", "output_files", "global_settings", "metadata"):
        if key in cfg and cfg[key] is not None and not isinstance(cfg[key], dict):
            raise ConfigError(f"'{key}' must be a mapping/dict in {path}")

    for i, op in enumerate(cfg["workflow"]):
        if not isinstance(op, dict) or "operation" not in op:
            raise ConfigError(f"workflow entry {i} must be a mapping with an 'operation' key in {path}")

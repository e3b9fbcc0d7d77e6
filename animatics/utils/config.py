# animatics/utils/config.py
import os
from typing import Any, Dict

from pathlib import Path

try:
    import yaml
except Exception as e:  # pragma: no cover
    raise RuntimeError("PyYAML is required: pip install pyyaml") from e


def _read_yaml(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"YAML at {path} must be a mapping/object.")
        return data


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_int(name: str) -> Any:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_overlay() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if os.getenv("ANIMATICS_LOG_LEVEL"):
        out.setdefault("logging", {})["level"] = os.getenv("ANIMATICS_LOG_LEVEL")
    if os.getenv("ANIMATICS_LOG_FILE"):
        out.setdefault("logging", {})["log_file"] = os.getenv("ANIMATICS_LOG_FILE")
    workers = _env_int("ANIMATICS_WORKERS")
    if workers is not None:
        out.setdefault("render", {})["workers"] = workers
    if os.getenv("ANIMATICS_ASSETS_ROOT"):
        out.setdefault("assets", {})["root"] = os.getenv("ANIMATICS_ASSETS_ROOT")
    if os.getenv("ANIMATICS_SCHEDULES_DIR"):
        out["schedules_dir"] = os.getenv("ANIMATICS_SCHEDULES_DIR")
    return out

import logging
import logging.handlers
import os
import sys
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from animatics.utils.config import _deep_merge, _env_overlay, _read_yaml

BASE = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# ---------------- Logging ----------------

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
LOG_FORMAT = logging.Formatter(
    '{"ts":"%(asctime)s","level":"%(levelname)s","step":"%(name)s","msg":"%(message)s"}'
)


def _add_file_handler(logger: logging.Logger, log_file: str) -> None:
    path = os.path.abspath(log_file)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return
    os.makedirs(os.path.dirname(path), exist_ok=True)
    fh = logging.handlers.RotatingFileHandler(path, maxBytes=5_000_000, backupCount=5)
    fh.setFormatter(LOG_FORMAT)
    logger.addHandler(fh)


def get_logger(name="animatics", log_file=None):
    logger = logging.getLogger(name)
    if logger.handlers:
        if log_file:
            _add_file_handler(logger, log_file)
        return logger
    level = os.getenv("ANIMATICS_LOG_LEVEL", "INFO").upper()
    logger.setLevel(level if level in LOG_LEVELS else logging.INFO)
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(LOG_FORMAT)
    logger.addHandler(sh)
    if log_file:
        _add_file_handler(logger, log_file)
    logger.propagate = False
    return logger


def attach_log_file(log_file: str) -> None:
    """Mirror every logger created through get_logger into a rotating file."""
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(logger, logging.Logger) and (name == "animatics" or logger.handlers):
            _add_file_handler(logger, log_file)


def set_log_level(level: str) -> None:
    """Apply a level to every logger created through get_logger."""
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (name == "animatics" or logger.handlers):
            logger.setLevel(level)


log = get_logger("animatics")

# ---------------- Config Models ----------------


class RenderCfg(BaseModel):
    workers: int = Field(4, ge=1, le=64)
    prune_inactive: bool = True


class ParticlesCfg(BaseModel):
    cache_size: int = Field(128, ge=0)


class LoggingCfg(BaseModel):
    level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"level must be one of: {sorted(LOG_LEVELS)}")
        return v.upper()


class AssetsCfg(BaseModel):
    root: str = "public"
    check_exists: bool = True


class EngineCfg(BaseModel):
    render: RenderCfg = Field(default_factory=RenderCfg)
    particles: ParticlesCfg = Field(default_factory=ParticlesCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)
    assets: AssetsCfg = Field(default_factory=AssetsCfg)
    schedules_dir: str = "conf/schedules"

    def resolve(self, relative: str) -> str:
        """Resolve a repo-relative config path against BASE."""
        if os.path.isabs(relative):
            return relative
        return os.path.join(BASE, relative)


# ---------------- Env & Loading ----------------


def load_env() -> dict:
    load_dotenv(os.path.join(BASE, ".env"))
    return {k: v for k, v in os.environ.items()}


def load_config(
    path: Optional[str] = None, cli_overrides: Optional[Dict[str, Any]] = None
) -> EngineCfg:
    """
    Load engine configuration with precedence (low -> high):
      1) Defaults baked into models
      2) conf/engine.yaml (or conf/engine.example.yaml)
      3) Environment variables (ANIMATICS_*, .env honoured)
      4) CLI overrides
    """
    if path is None:
        path = os.path.join(BASE, "conf", "engine.yaml")
        if not os.path.exists(path):
            path = os.path.join(BASE, "conf", "engine.example.yaml")
    raw = _read_yaml(path)

    load_env()
    merged = _deep_merge(raw, _env_overlay())
    if cli_overrides:
        merged = _deep_merge(merged, cli_overrides)

    try:
        cfg = EngineCfg(**merged)
    except ValidationError as e:
        log.error(f"Config validation failed: {e}")
        raise
    return cfg

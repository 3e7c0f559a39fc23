"""Configuration loading and validation."""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from domain.exceptions import ConfigurationError
from shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WORKERS = 10
DEFAULT_PROGRESS_PIVOT = 100
DEFAULT_BATCH_SIZE = 0
# DeleteObjects accepts at most 1000 keys per request
MAX_BATCH_SIZE = 1000
DEFAULT_IDLE_INTERVAL = 15.0
DEFAULT_RAMP_UP_DELAY = 1.0
DEFAULT_COMMAND_TIMEOUT = 300.0

BACKENDS = ("api", "command")


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration of one bulk deletion run."""

    # Input/Output
    input_path: Path
    endpoint: str
    output_path: Path

    # Pool and routing
    workers: int = DEFAULT_WORKERS
    progress_pivot: int = DEFAULT_PROGRESS_PIVOT
    batch_size: int = DEFAULT_BATCH_SIZE
    prefix: str = ""
    separator: str = ","

    # Timing
    idle_interval: float = DEFAULT_IDLE_INTERVAL
    ramp_up_delay: float = DEFAULT_RAMP_UP_DELAY

    # Backend
    backend: str = "api"
    region: str = "us-east-1"
    verify_ssl: bool = True
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT

    # Misc
    log_file: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        if not str(self.input_path):
            raise ConfigurationError("input_path is required")

        if not self.endpoint:
            raise ConfigurationError("endpoint is required")

        if not str(self.output_path):
            raise ConfigurationError("output_path is required")

        if self.workers < 1:
            raise ConfigurationError(f"Workers must be positive, got: {self.workers}")

        if self.progress_pivot < 1:
            raise ConfigurationError(f"Progress pivot must be positive, got: {self.progress_pivot}")

        if not 0 <= self.batch_size <= MAX_BATCH_SIZE:
            raise ConfigurationError(f"Batch size must be within 0..{MAX_BATCH_SIZE}, got: {self.batch_size}")

        if not self.separator:
            raise ConfigurationError("Separator cannot be empty")

        if self.idle_interval <= 0:
            raise ConfigurationError(f"Idle interval must be positive, got: {self.idle_interval}")

        if self.ramp_up_delay < 0:
            raise ConfigurationError(f"Ramp-up delay cannot be negative, got: {self.ramp_up_delay}")

        if self.backend not in BACKENDS:
            raise ConfigurationError(f"Invalid backend: {self.backend}")

        if self.command_timeout <= 0:
            raise ConfigurationError(f"Command timeout must be positive, got: {self.command_timeout}")

    @property
    def batch_mode(self) -> bool:
        return self.batch_size > 0


def parse_workers(value: Any) -> int:
    """Worker count, falling back to the default for malformed values."""
    workers = _parse_int("workers", value, DEFAULT_WORKERS)
    if workers < 1:
        logger.warning(f"Workers must be positive: {workers}, using default {DEFAULT_WORKERS}")
        return DEFAULT_WORKERS
    return workers


def parse_progress_pivot(value: Any) -> int:
    """Progress pivot, falling back to the default for malformed values."""
    pivot = _parse_int("pivot", value, DEFAULT_PROGRESS_PIVOT)
    if pivot < 1:
        logger.warning(f"Pivot must be positive: {pivot}, using default {DEFAULT_PROGRESS_PIVOT}")
        return DEFAULT_PROGRESS_PIVOT
    return pivot


def parse_batch_size(value: Any) -> int:
    """Batch size; 0 selects single mode, values above the store limit are clamped."""
    size = _parse_int("batch size", value, DEFAULT_BATCH_SIZE)
    if size < 0:
        logger.warning(f"Batch size cannot be negative: {size}, using default {DEFAULT_BATCH_SIZE}")
        return DEFAULT_BATCH_SIZE
    if size > MAX_BATCH_SIZE:
        logger.warning(f"Batch size {size} exceeds store limit, using {MAX_BATCH_SIZE}")
        return MAX_BATCH_SIZE
    return size


def _parse_int(label: str, value: Any, default: int) -> int:
    if isinstance(value, bool):
        value = str(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        logger.warning(f"Not int parameter {label}: {value!r}, using default {default}")
        return default


class ConfigLoader:
    """Loads run configuration from a YAML file, environment variables and CLI values."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            config_path: Optional path to YAML config file
        """
        self.config_path = config_path
        self._logger = get_logger(__name__)

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> RunConfig:
        """
        Load configuration from file and environment.

        Precedence (lowest first): YAML file, environment, overrides.

        Returns:
            RunConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_dict: Dict[str, Any] = {}

        if self.config_path is not None:
            config_dict.update(_without_empty(self._load_from_file(self.config_path)))

        config_dict.update(self._load_from_env())

        if overrides:
            config_dict.update(_without_empty(overrides))

        for required in ("input_path", "endpoint", "output_path"):
            if not config_dict.get(required):
                raise ConfigurationError(f"{required} is required")

        return self._build(config_dict)

    def _build(self, raw: Dict[str, Any]) -> RunConfig:
        kwargs: Dict[str, Any] = {
            "input_path": Path(raw["input_path"]),
            "endpoint": str(raw["endpoint"]),
            "output_path": Path(raw["output_path"]),
        }

        if "workers" in raw:
            kwargs["workers"] = parse_workers(raw["workers"])
        if "progress_pivot" in raw:
            kwargs["progress_pivot"] = parse_progress_pivot(raw["progress_pivot"])
        if "batch_size" in raw:
            kwargs["batch_size"] = parse_batch_size(raw["batch_size"])
        if "prefix" in raw:
            kwargs["prefix"] = str(raw["prefix"])
        if "separator" in raw:
            kwargs["separator"] = str(raw["separator"])
        if "backend" in raw:
            kwargs["backend"] = str(raw["backend"]).lower()
        if "region" in raw:
            kwargs["region"] = str(raw["region"])
        if "verify_ssl" in raw:
            kwargs["verify_ssl"] = _parse_bool(raw["verify_ssl"])
        if raw.get("log_file"):
            kwargs["log_file"] = Path(raw["log_file"])

        for key in ("idle_interval", "ramp_up_delay", "command_timeout"):
            if key in raw:
                try:
                    kwargs[key] = float(raw[key])
                except (TypeError, ValueError):
                    raise ConfigurationError(f"Invalid {key}: {raw[key]!r}")

        unknown = set(raw) - set(RunConfig.__dataclass_fields__)
        if unknown:
            self._logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

        return RunConfig(**kwargs)

    def _load_from_file(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            self._logger.warning(f"Config file not found: {path}")
            return {}

        self._logger.info(f"Loading config from {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")
        return loaded

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        if input_path := os.getenv("BULK_DELETE_INPUT"):
            env_config["input_path"] = input_path

        if endpoint := os.getenv("BULK_DELETE_ENDPOINT"):
            env_config["endpoint"] = endpoint

        if output_path := os.getenv("BULK_DELETE_OUTPUT"):
            env_config["output_path"] = output_path

        if workers := os.getenv("BULK_DELETE_WORKERS"):
            env_config["workers"] = workers

        if pivot := os.getenv("BULK_DELETE_PIVOT"):
            env_config["progress_pivot"] = pivot

        if batch_size := os.getenv("BULK_DELETE_BATCH_SIZE"):
            env_config["batch_size"] = batch_size

        prefix = os.getenv("BULK_DELETE_PREFIX")
        if prefix is not None:
            env_config["prefix"] = prefix

        if separator := os.getenv("BULK_DELETE_SEPARATOR"):
            env_config["separator"] = separator

        if interval := os.getenv("BULK_DELETE_INTERVAL"):
            env_config["idle_interval"] = interval

        if backend := os.getenv("BULK_DELETE_BACKEND"):
            env_config["backend"] = backend

        if command_timeout := os.getenv("BULK_DELETE_COMMAND_TIMEOUT"):
            env_config["command_timeout"] = command_timeout

        if region := os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION"):
            env_config["region"] = region

        return env_config


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("true", "1", "yes")


def _without_empty(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset keys; an empty YAML value (``prefix:``) loads as None."""
    return {k: v for k, v in values.items() if v is not None}

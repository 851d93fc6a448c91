"""
Configuration system for the vadclips session clipper.

Loads from YAML file or provides sensible defaults.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List
import yaml

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ClipperConfig:
    """
    Settings for session segmentation and the file driven detector.

    All timing values in seconds. The sample rate is not configurable,
    every clip is 16 kHz mono.
    """

    # Silence that closes a session (debounce period)
    silence_timeout: float = 4.0

    # Prefix for clip handles handed out by the ClipStore
    handle_prefix: str = "blob:vadclips"

    # FileBurstDetector pacing
    burst_seconds: float = 1.0
    gap_seconds: float = 0.5

    # Logging
    log_level: str = "WARNING"
    info_loggers: List[str] = field(default_factory=list)
    debug_loggers: List[str] = field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path) -> 'ClipperConfig':
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML config file

        Returns:
            ClipperConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file format: {path}")

        try:
            return cls(**data)
        except TypeError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e

    @classmethod
    def defaults(cls) -> 'ClipperConfig':
        return cls()

    def validate(self):
        """
        Validate configuration values.

        Raises:
            ValueError: If any values are invalid
        """
        for name in ("silence_timeout", "burst_seconds", "gap_seconds"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number")

        for name in ("handle_prefix", "log_level"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string")

        for name in ("info_loggers", "debug_loggers"):
            value = getattr(self, name)
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"{name} must be a list of logger names")

        if self.silence_timeout <= 0:
            raise ValueError("silence_timeout must be positive")

        if not self.handle_prefix:
            raise ValueError("handle_prefix cannot be empty")

        if self.burst_seconds <= 0:
            raise ValueError("burst_seconds must be positive")

        if self.gap_seconds < 0:
            raise ValueError("gap_seconds cannot be negative")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

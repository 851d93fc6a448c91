"""Configuration for the session clipper."""

from vadclips.config.clipper_config import ClipperConfig

__all__ = ["ClipperConfig"]

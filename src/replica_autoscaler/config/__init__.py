"""Configuration loading utilities.

Responsibility: Loads and validates controller configuration (cache duration,
scale-down delay default, logging, conflict retries) with override support.
"""

from .loader import load_config
from .schema import ControllerConfig, EngineConfig, LoggingConfig

__all__ = ["load_config", "ControllerConfig", "EngineConfig", "LoggingConfig"]

"""Replica autoscaler decision engine package."""

__version__ = "0.1.0"

__all__ = [
    "cli",
    "config",
    "controller",
    "core",
    "engine",
    "resources",
]

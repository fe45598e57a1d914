"""Engine configuration."""

from .config import EngineConfig, ResourceLimits

__all__ = ["EngineConfig", "ResourceLimits"]

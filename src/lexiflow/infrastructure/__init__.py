# Infrastructure Package
from .clock import FixedClock, SystemClock
from .yaml_store import YamlLibraryRepository

__all__ = ["FixedClock", "SystemClock", "YamlLibraryRepository"]

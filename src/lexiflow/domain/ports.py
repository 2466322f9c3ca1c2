"""
Ports (interfaces) consumed by the lexiflow core.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime

from .models import DailyProgress, VocabularyItem


class Clock(ABC):
    """
    Port for reading the current time.

    Injected instead of read globally so every core function stays deterministic.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current moment as a timezone-aware datetime."""
        pass

    @abstractmethod
    def today(self) -> date:
        """Return the learner's current calendar day."""
        pass


class LibraryRepository(ABC):
    """
    Port for loading and storing a learner's items and progress.

    Implementations:
        - YamlLibraryRepository: A single YAML document on disk.
    """

    @abstractmethod
    def list_items(self) -> list[VocabularyItem]:
        """Return every item in the library, in storage order."""
        pass

    @abstractmethod
    def get_item(self, item_id: str) -> VocabularyItem | None:
        """Return the item with the given id, or None if absent."""
        pass

    @abstractmethod
    def save_item(self, item: VocabularyItem) -> None:
        """Insert or replace an item keyed by its id (last writer wins)."""
        pass

    @abstractmethod
    def load_progress(self) -> DailyProgress:
        """Return the learner's progress block, defaults if none stored."""
        pass

    @abstractmethod
    def save_progress(self, progress: DailyProgress) -> None:
        """Persist the learner's progress block."""
        pass

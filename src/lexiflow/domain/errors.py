"""Exceptions raised by the lexiflow core."""


class LexiflowError(Exception):
    """Base class for all lexiflow errors."""


class InsufficientFundsError(LexiflowError):
    """Raised when the learner cannot afford an XP purchase."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"Not enough XP: {required} required, {available} available.")


class ItemNotFoundError(LexiflowError):
    """Raised when an item id is not present in the learner's library."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"No vocabulary item with id '{item_id}'.")


class LibraryFileError(LexiflowError):
    """Raised when a library file exists but cannot be parsed."""

"""Creating vocabulary items from externally supplied content."""

import logging
from datetime import datetime

from ulid import ULID

from lexiflow.application.scheduler import default_memory
from lexiflow.domain.models import VocabularyItem

logger = logging.getLogger(__name__)


def generate_item_id() -> str:
    """Generate a stable item ID using ULID."""
    return f"word_{ULID()}"


def new_item(
    term: str,
    now: datetime,
    *,
    translation: str = "",
    definition: str = "",
    example_sentence: str = "",
    pronunciation: str = "",
    phonetic_spelling: str = "",
    part_of_speech: str = "",
    mnemonic: str | None = None,
    item_id: str | None = None,
) -> VocabularyItem:
    """
    Create a new item, due immediately, with default memory state.

    Raises:
        ValueError: If the term is blank.
    """
    term = term.strip()
    if not term:
        raise ValueError("A vocabulary item needs a non-empty term")

    item = VocabularyItem(
        id=item_id or generate_item_id(),
        term=term,
        memory=default_memory(now),
        date_added=now,
        translation=translation,
        definition=definition,
        example_sentence=example_sentence,
        pronunciation=pronunciation,
        phonetic_spelling=phonetic_spelling,
        part_of_speech=part_of_speech,
        mnemonic=mnemonic,
    )
    logger.debug(f"Created item {item.id} for '{term}'")
    return item

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Dict, List

from app.core.errors import NotFound
from app.models.cards import Card

ID_PREFIX = "card_"
_IMMUTABLE_FIELDS = {"id", "created_at"}


def utcnow_iso() -> str:
    """Horodatage ISO-8601 UTC à la milliseconde, suffixe Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CardStore:
    """
    Collection de cartes en mémoire (perdue au redémarrage).
    Aucun verrou : une seule instance par process, mutations non sérialisées.
    """

    def __init__(self, prefix: str = ID_PREFIX):
        self.prefix = prefix
        self._cards: List[Card] = []
        self._counter = itertools.count(1)

    def next_id(self) -> str:
        return f"{self.prefix}{next(self._counter)}"

    def list(self) -> List[Card]:
        return list(self._cards)

    def get(self, card_id: str) -> Card:
        return self._cards[self._index(card_id)]

    def insert(self, fields: Dict) -> Card:
        card = Card(id=self.next_id(), **fields)
        self._cards.append(card)
        return card

    def replace(self, card_id: str, partial: Dict) -> Card:
        index = self._index(card_id)
        updates = {k: v for k, v in partial.items() if k not in _IMMUTABLE_FIELDS}
        card = self._cards[index].model_copy(update=updates)
        self._cards[index] = card
        return card

    def remove(self, card_id: str) -> None:
        del self._cards[self._index(card_id)]

    def __len__(self) -> int:
        return len(self._cards)

    def _index(self, card_id: str) -> int:
        for i, card in enumerate(self._cards):
            if card.id == card_id:
                return i
        raise NotFound()

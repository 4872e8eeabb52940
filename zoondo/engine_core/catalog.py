"""
Card catalog - Tribe and card definitions.

The catalog is a read-only lookup shared by every game:
- resolve_card(CardRef) -> CardDefinition
- tribe(slug) -> TribeDefinition (setup disposition)

Power plugins are bound to their cards once, when the catalog is built.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterable

from .state import CardRef, FIGHTERS, EMBLEMS, WILDCARD
from .geometry import MovePattern
from .powers import PowerRegistry, PowerResolver


@dataclass(frozen=True)
class CardDefinition:
    """
    Full definition of a card.

    Corners are listed clockwise from the top-left; a corner is either
    a number or the wildcard "*" (power trigger).
    """
    tribe: str
    type: str
    slug: str
    name: str
    moves: MovePattern = field(default_factory=list)
    corners: tuple[int | str, int | str, int | str, int | str] = (0, 0, 0, 0)
    power: str | None = None
    resolver: PowerResolver | None = field(default=None, compare=False)

    @property
    def ref(self) -> CardRef:
        return CardRef(tribe=self.tribe, type=self.type, slug=self.slug)

    @property
    def has_power(self) -> bool:
        return WILDCARD in self.corners

    def corner(self, index: int) -> int | str:
        return self.corners[index]


@dataclass
class TribeDefinition:
    """
    A tribe: its cards and its starting disposition.

    The disposition lists rows front line first, as the owner sees them.
    `None` leaves a cell empty.
    """
    slug: str
    name: str
    fighters: list[CardDefinition]
    emblem: CardDefinition
    disposition: list[list[str | None]]

    def card_ref(self, slug: str) -> CardRef:
        """Reference for a slug found in the disposition."""
        if slug == self.emblem.slug:
            return CardRef(tribe=self.slug, type=EMBLEMS, slug=slug)
        return CardRef(tribe=self.slug, type=FIGHTERS, slug=slug)

    @property
    def cards(self) -> list[CardDefinition]:
        return [*self.fighters, self.emblem]


class CardCatalog:
    """
    Catalog of tribes.

    Usage:
        catalog = CardCatalog(TRIBES, powers=POWERS)
        card = catalog.resolve_card(cell.card)
    """

    def __init__(
        self,
        tribes: Iterable[TribeDefinition],
        powers: PowerRegistry | None = None,
    ):
        self.powers = powers or PowerRegistry()
        self._tribes: dict[str, TribeDefinition] = {}
        self._cards: dict[CardRef, CardDefinition] = {}

        for tribe in tribes:
            self._tribes[tribe.slug] = tribe
            for card in tribe.cards:
                resolver = self.powers.get(card.tribe, card.slug)
                if resolver is not None:
                    card = replace(card, resolver=resolver)
                self._cards[card.ref] = card

    def resolve_card(self, ref: CardRef) -> CardDefinition:
        """Full definition for a card reference. Raises KeyError if unknown."""
        try:
            return self._cards[ref]
        except KeyError:
            raise KeyError(f"Unknown card: {ref.tribe}/{ref.type}/{ref.slug}") from None

    def tribe(self, slug: str) -> TribeDefinition:
        try:
            return self._tribes[slug]
        except KeyError:
            raise KeyError(f"Unknown tribe: {slug}") from None

    def has_tribe(self, slug: str) -> bool:
        return slug in self._tribes

    def list_tribes(self) -> list[TribeDefinition]:
        return list(self._tribes.values())

"""Cluedo cards, card catalogs and the bitset-backed CardSet."""

import enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Type


class CardCategory(enum.Enum):
    """Category of a card. Every solution holds exactly one card of each."""

    SUSPECT = "suspect"
    WEAPON = "weapon"
    ROOM = "room"


class Card(enum.IntEnum):
    """The 21 cards of the standard game, ordered suspects, weapons, rooms."""

    GREEN = 0
    MUSTARD = 1
    ORCHID = 2
    PEACOCK = 3
    PLUM = 4
    SCARLET = 5

    CANDLESTICK = 6
    KNIFE = 7
    PIPE = 8
    PISTOL = 9
    ROPE = 10
    WRENCH = 11

    BILLIARD_ROOM = 12
    BALLROOM = 13
    DINING_ROOM = 14
    GREENHOUSE = 15
    HALL = 16
    KITCHEN = 17
    LIBRARY = 18
    LOUNGE = 19
    STUDY = 20


class CardCatalog:
    """
    Fixed enumeration of the cards in play, partitioned into categories.

    Categories occupy contiguous index blocks in the order they are given.
    The (start, stop) block of each category is kept in ``bounds`` and every
    category lookup goes through that table.
    """

    def __init__(
        self,
        cards: Type[enum.IntEnum],
        category_counts: Dict[CardCategory, int],
    ) -> None:
        """
        Build a catalog over an IntEnum of cards.

        Args:
            cards: IntEnum whose values are exactly 0..n-1.
            category_counts: Ordered mapping category -> number of cards.
                The first category takes the first block of indices, and so on.

        Raises:
            ValueError: If a category is missing, a count is not positive,
                the counts do not add up to the enum size, or the enum values
                are not contiguous from 0.
        """
        members: List[enum.IntEnum] = sorted(cards, key=int)
        if [int(m) for m in members] != list(range(len(members))):
            raise ValueError("Card values must be contiguous and start at 0.")

        missing = [c for c in CardCategory if c not in category_counts]
        if missing:
            raise ValueError(
                f"Missing card counts for categories: {[c.value for c in missing]}."
            )
        if any(count <= 0 for count in category_counts.values()):
            raise ValueError("Every category must contain at least one card.")
        if sum(category_counts.values()) != len(members):
            raise ValueError(
                "Category counts must add up to the number of cards "
                f"({sum(category_counts.values())} != {len(members)})."
            )

        self.card_type: Type[enum.IntEnum] = cards
        self.card_count: int = len(members)
        self.categories: Tuple[CardCategory, ...] = tuple(category_counts)

        self.bounds: Dict[CardCategory, Tuple[int, int]] = {}
        start = 0
        for category, count in category_counts.items():
            self.bounds[category] = (start, start + count)
            start += count

        self._cards_by_index: Tuple[enum.IntEnum, ...] = tuple(members)
        self._category_by_index: Tuple[CardCategory, ...] = tuple(
            category
            for category, (lo, hi) in self.bounds.items()
            for _ in range(lo, hi)
        )

    @classmethod
    def from_names(
        cls, name: str, names_by_category: Dict[CardCategory, Sequence[str]]
    ) -> "CardCatalog":
        """
        Build a custom catalog from card names grouped by category.

        Args:
            name: Name of the generated IntEnum class.
            names_by_category: Ordered mapping category -> card names.

        Returns:
            A catalog whose card type is a freshly created IntEnum.
        """
        flat: List[Tuple[str, int]] = []
        for names in names_by_category.values():
            for card_name in names:
                flat.append((card_name, len(flat)))

        cards = enum.IntEnum(name, flat)  # type: ignore[misc]
        return cls(
            cards,
            {category: len(names) for category, names in names_by_category.items()},
        )

    def card(self, index: int) -> enum.IntEnum:
        """Return the card with the given index."""
        return self._cards_by_index[index]

    def cards(self) -> Tuple[enum.IntEnum, ...]:
        """Return all cards in index order."""
        return self._cards_by_index

    def category_of(self, card: int) -> CardCategory:
        """Return the category a card belongs to."""
        return self._category_by_index[int(card)]

    def category_count(self, category: CardCategory) -> int:
        """Return how many cards a category holds."""
        lo, hi = self.bounds[category]
        return hi - lo

    def cards_of(self, category: CardCategory) -> Tuple[enum.IntEnum, ...]:
        """Return the cards of one category in index order."""
        lo, hi = self.bounds[category]
        return self._cards_by_index[lo:hi]

    def card_set(self, cards: Iterable[int] = ()) -> "CardSet":
        """Return a new CardSet bound to this catalog."""
        return CardSet(cards, catalog=self)

    def full_set(self) -> "CardSet":
        """Return the set of every card in the catalog."""
        return CardSet.from_bits((1 << self.card_count) - 1, self)

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{c.value}={self.category_count(c)}" for c in self.categories
        )
        return f"CardCatalog({self.card_type.__name__}: {counts})"


STANDARD_CATALOG = CardCatalog(
    Card,
    {
        CardCategory.SUSPECT: 6,
        CardCategory.WEAPON: 6,
        CardCategory.ROOM: 9,
    },
)


class CardSet:
    """
    A set of cards stored as the bits of an int.

    Bit i is set iff the card with index i is in the set. The cardinality is
    cached. Equality and hashing depend on the bits only, so two sets with
    the same members are equal whatever order they were built in.

    CardSets are mutable: do not mutate one while it is used as a dict key.
    """

    __slots__ = ("_catalog", "_bits", "_size")

    def __init__(
        self, cards: Iterable[int] = (), catalog: Optional[CardCatalog] = None
    ) -> None:
        self._catalog: CardCatalog = catalog if catalog is not None else STANDARD_CATALOG
        bits = 0
        for card in cards:
            bits |= 1 << int(card)
        self._bits: int = bits
        self._size: int = bin(bits).count("1")

    @classmethod
    def from_bits(cls, bits: int, catalog: CardCatalog) -> "CardSet":
        """Build a set directly from a bit pattern."""
        card_set = cls.__new__(cls)
        card_set._catalog = catalog
        card_set._bits = bits
        card_set._size = bin(bits).count("1")
        return card_set

    @property
    def catalog(self) -> CardCatalog:
        return self._catalog

    @property
    def bits(self) -> int:
        return self._bits

    def size(self) -> int:
        return self._size

    def empty(self) -> bool:
        return self._size == 0

    def contains(self, card: int) -> bool:
        return (self._bits >> int(card)) & 1 == 1

    def insert(self, card: int) -> bool:
        """
        Add a card to the set.

        Returns:
            True if the card was already in the set, False otherwise.
        """
        mask = 1 << int(card)
        if self._bits & mask:
            return True
        self._bits |= mask
        self._size += 1
        return False

    def erase(self, card: int) -> None:
        mask = 1 << int(card)
        if not self._bits & mask:
            return
        self._bits &= ~mask
        self._size -= 1

    def clear(self) -> None:
        self._bits = 0
        self._size = 0

    def set_union(self, other: "CardSet") -> "CardSet":
        """Add every card of ``other`` to this set and return this set."""
        self._bits |= other._bits
        self._size = bin(self._bits).count("1")
        return self

    @staticmethod
    def intersection(a: "CardSet", b: "CardSet") -> "CardSet":
        """Return a new set with the cards present in both ``a`` and ``b``."""
        return CardSet.from_bits(a._bits & b._bits, a._catalog)

    def is_subset(self, other: "CardSet") -> bool:
        """Return True if every card of this set is also in ``other``."""
        return self._bits & other._bits == self._bits

    def copy(self) -> "CardSet":
        return CardSet.from_bits(self._bits, self._catalog)

    def __iter__(self) -> Iterator[enum.IntEnum]:
        bits = self._bits
        index = 0
        while bits:
            if bits & 1:
                yield self._catalog.card(index)
            bits >>= 1
            index += 1

    def __contains__(self, card: object) -> bool:
        if not isinstance(card, int):
            return False
        return self.contains(card)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size != 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CardSet):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self) -> int:
        return hash(self._bits)

    def __repr__(self) -> str:
        return f"CardSet([{', '.join(card.name for card in self)}])"

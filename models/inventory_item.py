# models/inventory_item.py
from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogEntry:
    code: str
    name: str
    unit: str = ""
    quantity_on_hand: float = 0
    position: int = 0

    def as_list(self):
        return [
            self.code,
            self.name,
            self.unit,
            format_quantity(self.quantity_on_hand),
        ]


@dataclass(frozen=True)
class UpdateIntent:
    """Suma `delta_quantity` al stock de la fila `target_position`."""
    target_position: int
    delta_quantity: float


@dataclass(frozen=True)
class ParsedSegment:
    query_text: str
    quantity: float


@dataclass(frozen=True)
class Candidate:
    entry: CatalogEntry
    score: float

    @property
    def position(self) -> int:
        return self.entry.position


@dataclass(frozen=True)
class AliasSet:
    canonical_name: str
    variants: frozenset


def format_quantity(value) -> str:
    """
    12.0 → '12'
    2.5  → '2.5'
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

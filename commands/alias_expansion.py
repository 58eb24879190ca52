# commands/alias_expansion.py
import re
import unicodedata
from typing import Iterable, Protocol

from models.inventory_item import AliasSet, CatalogEntry
from voice.voice_normalizer import normalize_text


# Variantes habituales del reconocedor y de los operadores
DEFAULT_ALIASES: dict[str, list[str]] = {
    # Licores
    "santa teresa": ["sta teresa", "santateresa", "st teresa", "santa tere"],
    "ron": ["rhon"],
    "whisky": ["wiski", "güisqui", "whiskey"],
    "vodka": ["vodca"],
    "gin": ["yin", "gin tonic"],
    "pisco": ["piscu"],

    # Cervezas
    "polar": ["polar pilsen", "polar ice", "polar light"],
    "heineken": ["ayneken"],
    "corona": ["korona"],

    # Refrescos
    "coca cola": ["cocacola", "coca", "coke"],
    "pepsi": ["pepsy"],
    "sprite": ["esprite"],

    # Abreviaturas
    "botella": ["bot", "btl", "botell"],
    "litro": ["lt", "lts", "l"],
    "unidad": ["un", "und", "u"],
    "caja": ["cx", "cajas"],
}

ABBREVIATIONS = {
    "santa": "sta",
    "santo": "sto",
    "doctor": "dr",
    "señor": "sr",
}


class AliasStore(Protocol):
    def variants_for(self, entry: CatalogEntry) -> set[str]:
        ...


def alias_key(entry_or_name) -> str:
    """Clave estable de un producto: su nombre normalizado."""
    name = entry_or_name.name if isinstance(entry_or_name, CatalogEntry) else entry_or_name
    return normalize_text(name)


def _word_pattern(phrase: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)")


def generate_auto_aliases(product_name: str) -> set[str]:
    """
    'Santa Teresa 1796' → {'santa teresa 1796', 'sta teresa 1796',
                            'santateresa 1796', ...}
    """
    lower = (product_name or "").lower().strip()
    if not lower:
        return set()

    aliases = {lower}

    # Sustituciones de la tabla por defecto (palabra completa)
    for key, variants in DEFAULT_ALIASES.items():
        pattern = _word_pattern(key)
        if pattern.search(lower):
            for variant in variants:
                aliases.add(pattern.sub(variant, lower, count=1))

    # Sin signos
    without_special = re.sub(r"\s+", " ", re.sub(r"[^\w\s]", " ", lower)).strip()
    aliases.add(without_special)

    # Sin tildes
    decomposed = unicodedata.normalize("NFD", lower)
    aliases.add("".join(c for c in decomposed if not unicodedata.combining(c)))

    # Abreviaturas
    abbreviated = lower
    for word, short in ABBREVIATIONS.items():
        abbreviated = _word_pattern(word).sub(short, abbreviated)
    aliases.add(abbreviated)

    aliases.discard("")
    return aliases


class InMemoryAliasStore:
    """Alias automáticos más los añadidos a mano durante la sesión."""

    def __init__(self, custom: dict[str, Iterable[str]] | None = None):
        self.custom: dict[str, set[str]] = {}
        for name, aliases in (custom or {}).items():
            for alias in aliases:
                self.add_alias(name, alias)

    def add_alias(self, entry_or_name, alias: str):
        alias = (alias or "").strip().lower()
        if not alias:
            raise ValueError("El alias no puede estar vacío")
        self.custom.setdefault(alias_key(entry_or_name), set()).add(alias)

    def custom_aliases(self, entry_or_name) -> set[str]:
        return set(self.custom.get(alias_key(entry_or_name), ()))

    def variants_for(self, entry: CatalogEntry) -> set[str]:
        return generate_auto_aliases(entry.name) | self.custom_aliases(entry)


def alias_set(entry: CatalogEntry, store: AliasStore) -> AliasSet:
    return AliasSet(canonical_name=entry.name, variants=frozenset(store.variants_for(entry)))


def find_product_by_text(
    text: str,
    catalog: Iterable[CatalogEntry],
    store: AliasStore,
) -> tuple[int, str] | None:
    """
    Búsqueda directa por nombre o alias, sin puntuación.
    Devuelve (posición, 'exact' | 'alias' | 'partial') o None.
    """
    wanted = normalize_text(text)
    if not wanted:
        return None

    for entry in catalog:
        if normalize_text(entry.name) == wanted:
            return entry.position, "exact"

        for variant in sorted(store.variants_for(entry)):
            alt = normalize_text(variant)
            if not alt:
                continue
            if alt == wanted:
                return entry.position, "alias"
            if alt in wanted or wanted in alt:
                return entry.position, "partial"

    return None


def alias_conflict(
    alias: str,
    entry: CatalogEntry,
    catalog: Iterable[CatalogEntry],
    store: AliasStore,
) -> CatalogEntry | None:
    """Otro producto al que el alias ya apunta por nombre o alias exacto."""
    catalog = tuple(catalog)
    found = find_product_by_text(alias, catalog, store)
    if found is None:
        return None

    position, match_type = found
    if match_type == "partial" or position == entry.position:
        return None
    return next(e for e in catalog if e.position == position)


def expanded_vocabulary(catalog: Iterable[CatalogEntry], store: AliasStore) -> list[str]:
    """Nombres, alias y palabras significativas (> 3 letras) del catálogo."""
    vocab: set[str] = set()

    for entry in catalog:
        aliases = alias_set(entry, store)
        vocab.add(aliases.canonical_name.lower())
        vocab.update(v.lower() for v in aliases.variants)

        words = re.sub(r"[^\w\s]", " ", entry.name.lower()).split()
        vocab.update(w for w in words if len(w) > 3)

    vocab.discard("")
    return sorted(vocab)

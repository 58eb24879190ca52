# commands/product_resolver.py
from typing import Iterable

from loguru import logger

from commands.alias_expansion import AliasStore
from commands.matching_config import DEFAULT_MAX_CANDIDATES, DEFAULT_MIN_SCORE
from commands.similarity import score
from models.inventory_item import Candidate, CatalogEntry


def entry_score(query: str, entry: CatalogEntry, alias_store: AliasStore | None = None) -> float:
    """Mejor puntuación entre nombre, código y alias del producto."""
    texts = [entry.name, entry.code]
    if alias_store is not None:
        # Orden fijo para que el resultado no dependa del set
        texts.extend(sorted(alias_store.variants_for(entry)))

    return max((score(query, text) for text in texts if text), default=0.0)


def retrieve(
    query: str,
    catalog: Iterable[CatalogEntry],
    alias_store: AliasStore | None = None,
    min_score: float = DEFAULT_MIN_SCORE,
    limit: int = DEFAULT_MAX_CANDIDATES,
) -> list[Candidate]:
    """
    Candidatos para una frase, de mejor a peor.
    Empates → orden del catálogo. Lista vacía = sin coincidencias.
    """
    candidates = []

    for entry in catalog:
        value = entry_score(query, entry, alias_store)
        if value > min_score:
            candidates.append(Candidate(entry=entry, score=value))

    candidates.sort(key=lambda c: (-c.score, c.entry.position))
    candidates = candidates[:limit]

    logger.debug(
        "retrieve '{}': {}",
        query,
        [(c.entry.name, round(c.score, 1)) for c in candidates],
    )
    return candidates

# commands/similarity.py
from voice.voice_normalizer import normalize_text


EXACT_SCORE = 100.0
CONTAINS_SCORE = 90.0

WORD_EXACT = 100.0
WORD_CONTAINS = 80.0
WORD_CHAR_WEIGHT = 60.0
WORD_MIN_CONTRIBUTION = 40.0
MIN_WORD_LENGTH = 3


def significant_words(text: str) -> list[str]:
    """Palabras de más de 2 letras de un texto ya normalizado."""
    return [w for w in text.split() if len(w) >= MIN_WORD_LENGTH]


def word_similarity(query_word: str, candidate_word: str) -> float:
    if query_word == candidate_word:
        return WORD_EXACT

    if query_word in candidate_word or candidate_word in query_word:
        return WORD_CONTAINS

    candidate_chars = set(candidate_word)
    shared = sum(1 for c in query_word if c in candidate_chars)
    longest = max(len(query_word), len(candidate_word))
    return shared / longest * WORD_CHAR_WEIGHT


def score(query: str, candidate_text: str) -> float:
    """
    Similitud 0–100 entre la frase dicha y un texto del catálogo.

    1. iguales tras normalizar          → 100
    2. uno contiene al otro entero      → 90
    3. solapamiento palabra a palabra, penalizado por cobertura
    """
    q = normalize_text(query)
    c = normalize_text(candidate_text)

    if not q or not c:
        return 0.0

    if q == c:
        return EXACT_SCORE

    if q in c or c in q:
        return CONTAINS_SCORE

    query_words = significant_words(q)
    candidate_words = significant_words(c)
    if not query_words or not candidate_words:
        return 0.0

    contributions = []
    for query_word in query_words:
        best = max(word_similarity(query_word, w) for w in candidate_words)
        if best > WORD_MIN_CONTRIBUTION:
            contributions.append(best)

    if not contributions:
        return 0.0

    average = sum(contributions) / len(contributions)
    coverage = len(contributions) / max(len(query_words), len(candidate_words))
    return average * coverage

# commands/command_parser.py
"""
Texto de un comando → lista de (frase de producto, cantidad).

    'coca cola veinte'         → [('coca cola', 20)]
    'cervezas 5, papas 3'      → [('cervezas', 5), ('papas', 3)]
    'añadir pepsi tres'        → [('pepsi', 3)]
    'cambiar agua mineral a 4' → [('agua mineral', 4)]

Todas las cantidades se suman al stock; nunca lo sustituyen.
"""
import math
import re

from loguru import logger

from commands.errors import (
    EmptySegmentationResult,
    InvalidQuantity,
    UnrecognizedCommandSyntax,
)
from commands.matching_config import DEFAULT_MIN_QUERY_LENGTH
from models.inventory_item import ParsedSegment
from voice.voice_normalizer import prepare_command


# Coma o punto decimal: "1,5" y "1.5" son el mismo número
NUMBER = r"-?\d+(?:[.,]\d+)?"

# Número suelto: no pegado a letras ("350ml" no cuenta) ni cortado ("1,5ml")
NUMBER_TOKEN = re.compile(rf"(?<![\w.]){NUMBER}(?!\w|[.,]\d)")

LIST_SEPARATORS = re.compile(r",\s*y\s|;\s|\stambi[eé]n\s")
COMMA_BEFORE_WORD = re.compile(r",\s*[^\W\d_]")

ADD_VERBS = r"(?:añadir|anadir|agregar|sumar)"
UPDATE_VERBS = r"(?:actualizar|cambiar|poner)"

SIMPLE_PATTERNS = [
    re.compile(rf"^(?P<phrase>.+?)\s+(?P<number>{NUMBER})$"),
    re.compile(rf"^{ADD_VERBS}\s+(?P<phrase>.+?)\s+(?P<number>{NUMBER})$"),
    re.compile(rf"^{UPDATE_VERBS}\s+(?P<phrase>.+?)\s+(?:a|con|en)\s+(?P<number>{NUMBER})$"),
]

_LEADING_NOISE = re.compile(
    rf"^(?:(?:y|e|tambi[eé]n|{ADD_VERBS}|{UPDATE_VERBS})\s+)+"
)
_TRAILING_NOISE = re.compile(r"(?:\s+(?:a|con|en|y))+$")
_EDGE_PUNCTUATION = " \t,;:.!?"


def clean_phrase(phrase: str) -> str:
    """', y cervezas ' → 'cervezas'; 'poner coca cola a' → 'coca cola'"""
    phrase = phrase.strip(_EDGE_PUNCTUATION)
    phrase = _LEADING_NOISE.sub("", phrase)
    phrase = _TRAILING_NOISE.sub("", phrase)
    return phrase.strip(_EDGE_PUNCTUATION)


def to_quantity(number: str) -> float:
    return float(number.replace(",", "."))


def is_valid_quantity(quantity: float) -> bool:
    return math.isfinite(quantity) and quantity > 0


# -----------------------
# Varios comandos
# -----------------------

def is_multi_command(text: str, comma_heuristic: bool = True) -> bool:
    converted = prepare_command(text)

    if len(NUMBER_TOKEN.findall(converted)) >= 2:
        return True

    if LIST_SEPARATORS.search(converted):
        return True

    return comma_heuristic and bool(COMMA_BEFORE_WORD.search(converted))


def segment(
    text: str,
    min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
    rejected: list[InvalidQuantity] | None = None,
) -> list[ParsedSegment]:
    """
    Cada número cierra un segmento: la frase es lo que hay entre el
    número anterior (o el inicio) y este número.

    Un segmento con cantidad <= 0 se descarta solo él; si se pasa
    `rejected`, ahí queda el InvalidQuantity para avisar al operador.
    """
    converted = prepare_command(text)
    segments = []
    start = 0
    found = False

    for match in NUMBER_TOKEN.finditer(converted):
        found = True
        phrase = clean_phrase(converted[start:match.start()])
        start = match.end()

        if len(phrase) < min_query_length:
            logger.debug("Frase demasiado corta descartada: '{}'", phrase)
            continue

        quantity = to_quantity(match.group())
        if not is_valid_quantity(quantity):
            error = InvalidQuantity(phrase, match.group())
            logger.warning(error.message)
            if rejected is not None:
                rejected.append(error)
            continue

        segments.append(ParsedSegment(query_text=phrase, quantity=quantity))

    trailing = clean_phrase(converted[start:])
    if found and trailing:
        logger.warning("Texto sin cantidad descartado: '{}'", trailing)

    return segments


def split_multi_command(
    text: str,
    min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
    rejected: list[InvalidQuantity] | None = None,
) -> list[ParsedSegment]:
    """Un solo segmento útil también vale: el resto ya se descartó."""
    segments = segment(text, min_query_length, rejected)
    if not segments:
        raise EmptySegmentationResult(text, 0)
    return segments


# -----------------------
# Un solo comando
# -----------------------

def _simple_matches(text: str):
    """(frase, número) de cada patrón que encaja, en orden."""
    text = text.strip().lower().rstrip(".!?").strip()

    for pattern in SIMPLE_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        phrase = clean_phrase(match.group("phrase"))
        if phrase:
            yield phrase, match.group("number")


def match_simple(text: str) -> ParsedSegment | None:
    for phrase, number in _simple_matches(prepare_command(text)):
        quantity = to_quantity(number)
        if is_valid_quantity(quantity):
            return ParsedSegment(query_text=phrase, quantity=quantity)
    return None


# -----------------------
# Entrada principal
# -----------------------

def parse_command(
    text: str,
    min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
    comma_heuristic: bool = True,
    rejected: list[InvalidQuantity] | None = None,
) -> list[ParsedSegment]:
    """
    Lanza InvalidQuantity si la única cantidad es <= 0 y
    UnrecognizedCommandSyntax si no encaja ningún formato.
    Los segmentos descartados por cantidad se añaden a `rejected`.
    """
    converted = prepare_command(text)
    if not converted:
        raise UnrecognizedCommandSyntax(text or "")

    if is_multi_command(converted, comma_heuristic):
        dropped: list[InvalidQuantity] = []
        try:
            segments = split_multi_command(converted, min_query_length, dropped)
        except EmptySegmentationResult as e:
            if dropped:
                raise dropped[0]
            logger.info("{} → se trata como un solo comando", e.message)
        else:
            if rejected is not None:
                rejected.extend(dropped)
            return segments

    single = match_simple(converted)
    if single is not None:
        return [single]

    invalid = next(_simple_matches(converted), None)
    if invalid is not None:
        raise InvalidQuantity(*invalid)

    raise UnrecognizedCommandSyntax(text.strip())

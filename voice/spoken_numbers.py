# voice/spoken_numbers.py
"""
Números hablados en español → dígitos.

Primero se sustituyen los compuestos ("noventa y nueve", "ciento cuarenta
y cinco"), del más largo al más corto, y después las palabras sueltas
("cero" … "quinientos"). Así "treinta y uno" da "31" y nunca "30 y 1".

Por encima de 599 no hay tabla: esos números se dejan tal cual.
"""
import re


UNITS = {
    "uno": 1, "dos": 2, "tres": 3, "cuatro": 4, "cinco": 5,
    "seis": 6, "siete": 7, "ocho": 8, "nueve": 9,
}

TEENS = {
    "diez": 10, "once": 11, "doce": 12, "trece": 13, "catorce": 14,
    "quince": 15, "dieciseis": 16, "diecisiete": 17, "dieciocho": 18,
    "diecinueve": 19,
}

TWENTIES = {
    "veinte": 20, "veintiuno": 21, "veintiuna": 21, "veintiun": 21,
    "veintidos": 22, "veintitres": 23, "veinticuatro": 24,
    "veinticinco": 25, "veintiseis": 26, "veintisiete": 27,
    "veintiocho": 28, "veintinueve": 29,
}

TENS = {
    "treinta": 30, "cuarenta": 40, "cincuenta": 50, "sesenta": 60,
    "setenta": 70, "ochenta": 80, "noventa": 90,
}

HUNDREDS = {
    "ciento": 100, "doscientos": 200, "trescientos": 300,
    "cuatrocientos": 400, "quinientos": 500,
}

# Variantes con tilde que devuelve el reconocedor
ACCENTED = {
    "dieciséis": 16, "veintiún": 21, "veintidós": 22,
    "veintitrés": 23, "veintiséis": 26,
}

SIMPLE_NUMBERS: dict[str, int] = {
    "cero": 0,
    **UNITS,
    **TEENS,
    **TWENTIES,
    **TENS,
    "cien": 100,
    **HUNDREDS,
    **ACCENTED,
}


def _build_compounds() -> dict[str, int]:
    compounds: dict[str, int] = {}

    # treinta y uno … noventa y nueve
    below_hundred: dict[str, int] = {}
    for ten_word, ten in TENS.items():
        for unit_word, unit in UNITS.items():
            compounds[f"{ten_word} y {unit_word}"] = ten + unit
            below_hundred[f"{ten_word} y {unit_word}"] = ten + unit

    # Todo lo que puede seguir a una centena
    for table in (UNITS, TEENS, TWENTIES, TENS, ACCENTED):
        below_hundred.update(table)

    # ciento uno … quinientos noventa y nueve
    for hundred_word, hundred in HUNDREDS.items():
        for rest_word, rest in below_hundred.items():
            compounds[f"{hundred_word} {rest_word}"] = hundred + rest

    return compounds


COMPOUND_NUMBERS: dict[str, int] = _build_compounds()


def _alternation(phrases) -> re.Pattern:
    # Más palabras primero y, a igualdad, más largas primero
    ordered = sorted(phrases, key=lambda p: (-len(p.split()), -len(p), p))
    body = "|".join(
        r"\s+".join(re.escape(word) for word in phrase.split())
        for phrase in ordered
    )
    return re.compile(rf"(?<!\w)(?:{body})(?!\w)", re.IGNORECASE)


_COMPOUND_RE = _alternation(COMPOUND_NUMBERS)
_SIMPLE_RE = _alternation(SIMPLE_NUMBERS)


def _lookup_key(phrase: str) -> str:
    return " ".join(phrase.lower().split())


def words_to_number(phrase: str) -> int | None:
    """'noventa y nueve' → 99; None si la frase no está en las tablas."""
    key = _lookup_key(phrase or "")
    if key in COMPOUND_NUMBERS:
        return COMPOUND_NUMBERS[key]
    return SIMPLE_NUMBERS.get(key)


def convert_numerals(text: str) -> str:
    """
    'noventa y nueve cajas' → '99 cajas'
    'coca cola veinte'      → 'coca cola 20'
    """
    if not text:
        return ""

    text = _COMPOUND_RE.sub(
        lambda m: str(COMPOUND_NUMBERS[_lookup_key(m.group(0))]), text
    )
    return _SIMPLE_RE.sub(
        lambda m: str(SIMPLE_NUMBERS[_lookup_key(m.group(0))]), text
    )

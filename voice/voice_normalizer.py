# voice/voice_normalizer.py
import re
import unicodedata

from voice.spoken_numbers import convert_numerals


_NON_WORD = re.compile(r"[^\w\s]|_")
_SPACES = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """
    'CAFÉ  Molido!' → 'cafe molido'

    - minúsculas
    - sin tildes ni diacríticos
    - símbolos → espacio
    - espacios colapsados
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFD", text.lower())
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = _NON_WORD.sub(" ", text)
    return _SPACES.sub(" ", text).strip()


def prepare_command(text: str) -> str:
    """
    Texto de comando listo para segmentar:
    minúsculas, espacios colapsados y números hablados en dígitos.
    Conserva comas y punto y coma, que separan comandos.
    """
    if not text:
        return ""

    text = _SPACES.sub(" ", text.lower()).strip()
    return convert_numerals(text)

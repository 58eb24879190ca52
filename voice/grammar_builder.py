#grammar_builder.py

from commands.alias_expansion import InMemoryAliasStore, expanded_vocabulary
from voice.spoken_numbers import SIMPLE_NUMBERS

BASE_GRAMMAR = [
    "añadir",
    "agregar",
    "sumar",
    "actualizar",
    "cambiar",
    "poner",
    "a",
    "con",
    "en",
    "y",
    "también",
    "cancelar",
    "atrás",
    "anterior",
    "opción",
]

UNKNOWN_WORD = "[unk]"


def build_grammar(entries, alias_store=None) -> list[str]:
    """Vocabulario cerrado para vosk: comandos, números y catálogo."""
    grammar = set(BASE_GRAMMAR)
    grammar.update(SIMPLE_NUMBERS)
    grammar.update(expanded_vocabulary(entries, alias_store or InMemoryAliasStore()))

    # Las palabras con dígitos no existen en el vocabulario del modelo
    grammar = {phrase for phrase in grammar if not any(c.isdigit() for c in phrase)}

    return sorted(grammar) + [UNKNOWN_WORD]

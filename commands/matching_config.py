# commands/matching_config.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


DEFAULT_MIN_SCORE = 50.0
DEFAULT_MAX_CANDIDATES = 5
DEFAULT_MIN_QUERY_LENGTH = 3

_TRUE_VALUES = {"1", "true", "yes", "si", "sí", "on"}


@dataclass(frozen=True)
class MatchingSettings:
    min_score: float = DEFAULT_MIN_SCORE
    max_candidates: int = DEFAULT_MAX_CANDIDATES
    min_query_length: int = DEFAULT_MIN_QUERY_LENGTH
    # "ron, añejo 5 años" también dispara esta heurística
    comma_heuristic: bool = True
    # None → nunca se aplica sin elegir
    auto_apply_min_score: float | None = None


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def load_matching_settings() -> MatchingSettings:
    """
    Lee los umbrales del entorno (.env incluido).
    Un valor numérico mal escrito lanza ValueError al arrancar.
    """
    auto_apply = os.getenv("AUTO_APPLY_MIN_SCORE", "").strip()

    settings = MatchingSettings(
        min_score=float(os.getenv("MATCH_MIN_SCORE", str(DEFAULT_MIN_SCORE))),
        max_candidates=int(
            os.getenv("MATCH_MAX_CANDIDATES", str(DEFAULT_MAX_CANDIDATES))
        ),
        min_query_length=int(
            os.getenv("MIN_SEGMENT_QUERY_LENGTH", str(DEFAULT_MIN_QUERY_LENGTH))
        ),
        comma_heuristic=_env_flag("MULTI_COMMAND_COMMA_HEURISTIC", True),
        auto_apply_min_score=float(auto_apply) if auto_apply else None,
    )

    if settings.max_candidates < 1:
        raise ValueError(
            f"MATCH_MAX_CANDIDATES debe ser >= 1: {settings.max_candidates}"
        )
    return settings

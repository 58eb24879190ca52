# commands/command_state.py
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable

from loguru import logger

from commands.alias_expansion import AliasStore
from commands.command_parser import parse_command
from commands.errors import CommandError, NoMatchFound
from commands.matching_config import MatchingSettings, load_matching_settings
from commands.product_resolver import retrieve
from models.inventory_item import (
    Candidate,
    CatalogEntry,
    ParsedSegment,
    UpdateIntent,
    format_quantity,
)
from voice.voice_normalizer import normalize_text
from voice.spoken_numbers import words_to_number


class CommandMode(Enum):
    IDLE = "idle"
    AWAITING_SINGLE_CHOICE = "awaiting_single_choice"
    AWAITING_MULTI_CHOICE = "awaiting_multi_choice"
    TERMINAL = "terminal"


CANCEL_WORDS = {"cancelar", "cancela", "cancelo"}
# "no" a secas cancela; "no, la dos" es una elección
CANCEL_REPLY = ["no"]
BACK_WORDS = {"atras", "anterior", "volver", "vuelve"}


def option_number(words: list[str]) -> int | None:
    """Primer número de la respuesta, en cifras o hablado: "la dos" → 2."""
    for word in words:
        if word.isdigit():
            return int(word)
        number = words_to_number(word)
        if number is not None:
            return number
    return None


@dataclass
class DisambiguationSession:
    pending: list[tuple[ParsedSegment, list[Candidate]]]
    cursor: int = 0
    skipped: list[ParsedSegment] = field(default_factory=list)
    # cursor → candidato ya aplicado
    confirmed: dict[int, Candidate] = field(default_factory=dict)

    def is_terminal(self) -> bool:
        return self.cursor == len(self.pending)

    def current(self) -> tuple[ParsedSegment, list[Candidate]]:
        return self.pending[self.cursor]


@dataclass(frozen=True)
class CommandFeedback:
    message: str
    mode: CommandMode
    intents: tuple[UpdateIntent, ...] = ()
    skipped: tuple[ParsedSegment, ...] = ()
    finished: bool = False


@dataclass(frozen=True)
class SessionView:
    mode: CommandMode
    segment: ParsedSegment | None = None
    candidates: tuple[Candidate, ...] = ()
    cursor: int = 0
    total: int = 0
    skipped: tuple[ParsedSegment, ...] = ()
    confirmed: Candidate | None = None


def describe_segment(segment: ParsedSegment) -> str:
    return f"{segment.query_text} {format_quantity(segment.quantity)}"


class CommandState:
    """
    Flujo de selección con el operador.

    IDLE → AWAITING_SINGLE_CHOICE   un producto, se muestran candidatos
    IDLE → AWAITING_MULTI_CHOICE    varios productos, uno detrás de otro
    elección final → TERMINAL (solo en el feedback) → IDLE

    Cada elección devuelve su UpdateIntent en el acto: si el operador
    abandona a mitad, lo ya confirmado no se pierde.
    """

    def __init__(
        self,
        alias_store: AliasStore | None = None,
        settings: MatchingSettings | None = None,
    ):
        self.alias_store = alias_store
        self.settings = settings or load_matching_settings()
        self.mode = CommandMode.IDLE
        self.session: DisambiguationSession | None = None

    def reset(self):
        self.mode = CommandMode.IDLE
        self.session = None

    def _feedback(self, message, **kwargs) -> CommandFeedback:
        kwargs.setdefault("mode", self.mode)
        return CommandFeedback(message=message, **kwargs)

    # -----------------------
    # Nuevo comando
    # -----------------------

    def submit(self, utterance: str, catalog: Iterable[CatalogEntry]) -> CommandFeedback:
        if self.mode != CommandMode.IDLE:
            return self._feedback("Hay una selección pendiente: elige una opción o cancela")

        # Foto fija del catálogo para toda la sesión
        snapshot = tuple(catalog)

        rejected = []
        try:
            segments = parse_command(
                utterance,
                min_query_length=self.settings.min_query_length,
                comma_heuristic=self.settings.comma_heuristic,
                rejected=rejected,
            )
        except CommandError as e:
            logger.info("Comando rechazado: {}", e.message)
            return self._feedback(e.message)

        if len(segments) == 1:
            feedback = self._start_single(segments[0], snapshot)
        else:
            feedback = self._start_multi(segments, snapshot)

        if rejected:
            # Segmentos descartados por cantidad: se avisa, el resto sigue
            notices = ". ".join(e.message for e in rejected)
            feedback = replace(feedback, message=f"{notices}. {feedback.message}")
        return feedback

    def handle_text(self, text: str, catalog: Iterable[CatalogEntry]) -> CommandFeedback:
        """
        Entrada única para texto o voz: en reposo es un comando nuevo;
        con una selección abierta es "uno", "2", "atrás" o "cancelar".
        """
        if self.mode == CommandMode.IDLE:
            return self.submit(text, catalog)

        words = normalize_text(text).split()
        if not words:
            return self._feedback(self._prompt())

        if words == CANCEL_REPLY or any(w in CANCEL_WORDS for w in words):
            return self.cancel()

        if any(w in BACK_WORDS for w in words):
            return self.step_back()

        number = option_number(words)
        if number is not None:
            return self.choose(number - 1)

        return self._feedback(
            "Di el número de la opción, 'atrás' o 'cancelar'. " + self._prompt()
        )

    def _candidates(self, segment: ParsedSegment, snapshot) -> list[Candidate]:
        return retrieve(
            segment.query_text,
            snapshot,
            alias_store=self.alias_store,
            min_score=self.settings.min_score,
            limit=self.settings.max_candidates,
        )

    def _auto_choice(self, candidates: list[Candidate]) -> Candidate | None:
        threshold = self.settings.auto_apply_min_score
        if threshold is None:
            return None
        confident = [c for c in candidates if c.score >= threshold]
        return confident[0] if len(confident) == 1 else None

    def _start_single(self, segment: ParsedSegment, snapshot) -> CommandFeedback:
        candidates = self._candidates(segment, snapshot)

        if not candidates:
            error = NoMatchFound(segment.query_text)
            logger.info(error.message)
            return self._feedback(error.message)

        auto = self._auto_choice(candidates)
        if auto is not None:
            intent = UpdateIntent(auto.entry.position, segment.quantity)
            logger.info("Aplicado sin preguntar: {} → {}", describe_segment(segment), auto.entry.name)
            return self._feedback(
                f"Añadido {format_quantity(segment.quantity)} a {auto.entry.name}",
                mode=CommandMode.TERMINAL,
                intents=(intent,),
                finished=True,
            )

        self.session = DisambiguationSession(pending=[(segment, candidates)])
        self.mode = CommandMode.AWAITING_SINGLE_CHOICE
        logger.info("{} candidatos para '{}'", len(candidates), segment.query_text)
        return self._feedback(self._prompt())

    def _start_multi(self, segments: list[ParsedSegment], snapshot) -> CommandFeedback:
        pending = []
        skipped = []

        for segment in segments:
            candidates = self._candidates(segment, snapshot)
            if candidates:
                pending.append((segment, candidates))
            else:
                logger.info(NoMatchFound(segment.query_text).message)
                skipped.append(segment)

        skipped_text = ", ".join(describe_segment(s) for s in skipped)

        if not pending:
            return self._feedback(
                f"Ningún producto encontrado: {skipped_text}",
                skipped=tuple(skipped),
            )

        self.session = DisambiguationSession(pending=pending, skipped=skipped)
        self.mode = CommandMode.AWAITING_MULTI_CHOICE

        message = f"{len(segments)} comandos: {len(pending)} por confirmar"
        if skipped:
            message += f", {len(skipped)} sin coincidencias ({skipped_text})"
        logger.info(message)

        return self._feedback(f"{message}. {self._prompt()}", skipped=tuple(skipped))

    # -----------------------
    # Selección
    # -----------------------

    def choose(self, index: int) -> CommandFeedback:
        if self.mode == CommandMode.IDLE:
            return self._feedback("No hay ninguna selección pendiente")

        session = self.session
        segment, candidates = session.current()

        if not 0 <= index < len(candidates):
            return self._feedback(f"Opción inválida: {index + 1}. {self._prompt()}")

        chosen = candidates[index]

        if self.mode == CommandMode.AWAITING_SINGLE_CHOICE:
            intent = UpdateIntent(chosen.entry.position, segment.quantity)
            self.reset()
            logger.info("Confirmado: {} → {}", describe_segment(segment), chosen.entry.name)
            return self._feedback(
                f"Añadido {format_quantity(segment.quantity)} a {chosen.entry.name}",
                mode=CommandMode.TERMINAL,
                intents=(intent,),
                finished=True,
            )

        # Selección múltiple
        intents: tuple[UpdateIntent, ...] = ()
        if session.cursor in session.confirmed:
            # Volver atrás es para revisar; no se aplica dos veces
            previous = session.confirmed[session.cursor]
            message = f"Ya aplicado a {previous.entry.name}"
        else:
            intents = (UpdateIntent(chosen.entry.position, segment.quantity),)
            session.confirmed[session.cursor] = chosen
            message = f"Añadido {format_quantity(segment.quantity)} a {chosen.entry.name}"
            logger.info("Confirmado ({}/{}): {} → {}",
                        session.cursor + 1, len(session.pending),
                        describe_segment(segment), chosen.entry.name)

        session.cursor += 1

        if session.is_terminal():
            return self._finish(message, intents)

        return self._feedback(f"{message}. {self._prompt()}", intents=intents)

    def step_back(self) -> CommandFeedback:
        if self.mode != CommandMode.AWAITING_MULTI_CHOICE:
            return self._feedback("Solo se puede volver atrás con varios productos")

        if self.session.cursor == 0:
            return self._feedback(f"Ya estás en el primero. {self._prompt()}")

        self.session.cursor -= 1
        return self._feedback(self._prompt())

    def cancel(self) -> CommandFeedback:
        if self.mode == CommandMode.IDLE:
            return self._feedback("Nada que cancelar")

        applied = len(self.session.confirmed)
        self.reset()
        logger.info("Selección cancelada ({} ya aplicados)", applied)

        message = "Selección cancelada"
        if applied:
            message += f" ({applied} ya aplicados)"
        return self._feedback(message)

    def _finish(self, message: str, intents) -> CommandFeedback:
        session = self.session
        applied = len(session.confirmed)
        skipped = tuple(session.skipped)
        self.reset()

        summary = f"Completado: {applied} aplicados, {len(skipped)} omitidos"
        if skipped:
            summary += " (" + ", ".join(describe_segment(s) for s in skipped) + ")"
        logger.info(summary)

        return self._feedback(
            f"{message}. {summary}",
            mode=CommandMode.TERMINAL,
            intents=intents,
            skipped=skipped,
            finished=True,
        )

    # -----------------------
    # Vista para la UI
    # -----------------------

    def view(self) -> SessionView:
        if self.mode == CommandMode.IDLE or self.session is None:
            return SessionView(mode=self.mode)

        session = self.session
        segment, candidates = session.current()
        return SessionView(
            mode=self.mode,
            segment=segment,
            candidates=tuple(candidates),
            cursor=session.cursor,
            total=len(session.pending),
            skipped=tuple(session.skipped),
            confirmed=session.confirmed.get(session.cursor),
        )

    def _prompt(self) -> str:
        if self.session is None or self.session.is_terminal():
            return ""

        segment, candidates = self.session.current()
        options = ", ".join(
            f"{i + 1}) {c.entry.name}" for i, c in enumerate(candidates)
        )
        progress = ""
        if self.mode == CommandMode.AWAITING_MULTI_CHOICE:
            progress = f"({self.session.cursor + 1}/{len(self.session.pending)}) "
        return f"{progress}{describe_segment(segment)}: {options}"

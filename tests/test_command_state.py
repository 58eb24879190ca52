import pytest

from commands.command_state import CommandMode, CommandState, option_number
from commands.matching_config import MatchingSettings
from models.inventory_item import CatalogEntry, ParsedSegment, UpdateIntent


@pytest.fixture
def state(settings):
    return CommandState(settings=settings)


def test_single_command_waits_for_choice(state, catalog):
    feedback = state.submit("coca cola veinte", catalog)

    assert feedback.mode == CommandMode.AWAITING_SINGLE_CHOICE
    assert feedback.intents == ()
    view = state.view()
    assert view.segment == ParsedSegment("coca cola", 20.0)
    assert [c.position for c in view.candidates] == [0]
    assert view.candidates[0].score >= 90


def test_single_choice_emits_intent(state, catalog):
    state.submit("coca cola veinte", catalog)
    feedback = state.choose(0)

    assert feedback.intents == (UpdateIntent(target_position=0, delta_quantity=20.0),)
    assert feedback.mode == CommandMode.TERMINAL
    assert feedback.finished
    assert state.mode == CommandMode.IDLE


def test_multi_command_walks_every_segment(state, catalog):
    feedback = state.submit("cervezas 5, papas 3", catalog)
    assert feedback.mode == CommandMode.AWAITING_MULTI_CHOICE
    assert state.view().cursor == 0
    assert state.view().total == 2

    feedback = state.choose(0)
    assert feedback.intents == (UpdateIntent(1, 5.0),)
    assert not feedback.finished
    assert state.view().cursor == 1
    assert state.view().segment == ParsedSegment("papas", 3.0)

    feedback = state.choose(0)
    assert feedback.intents == (UpdateIntent(2, 3.0),)
    assert feedback.finished
    assert feedback.mode == CommandMode.TERMINAL
    assert "2 aplicados, 0 omitidos" in feedback.message
    assert state.mode == CommandMode.IDLE


def test_segments_without_candidates_are_skipped(state, catalog):
    feedback = state.submit("cervezas 5, xyzzy 3", catalog)

    assert feedback.mode == CommandMode.AWAITING_MULTI_CHOICE
    assert feedback.skipped == (ParsedSegment("xyzzy", 3.0),)
    assert state.view().total == 1

    feedback = state.choose(0)
    assert feedback.finished
    assert feedback.skipped == (ParsedSegment("xyzzy", 3.0),)
    assert "1 aplicados, 1 omitidos (xyzzy 3)" in feedback.message


def test_all_segments_without_candidates(state, catalog):
    feedback = state.submit("xyzzy 3, qwqwq 2", catalog)

    assert feedback.mode == CommandMode.IDLE
    assert feedback.message.startswith("Ningún producto encontrado")
    assert len(feedback.skipped) == 2


def test_no_match_for_single_command(state, catalog):
    feedback = state.submit("xyzzy 3", catalog)

    assert feedback.mode == CommandMode.IDLE
    assert feedback.message == "Producto no encontrado: xyzzy"
    assert feedback.intents == ()


@pytest.mark.parametrize(
    "text, message",
    [
        ("hola", "Comando no reconocido"),
        ("coca cola cero", "Cantidad inválida"),
    ],
)
def test_parse_errors_become_feedback(state, catalog, text, message):
    feedback = state.submit(text, catalog)

    assert feedback.mode == CommandMode.IDLE
    assert feedback.message.startswith(message)


def test_step_back_does_not_apply_twice(state, catalog):
    state.submit("cervezas 5, papas 3, agua 2", catalog)
    assert state.choose(0).intents == (UpdateIntent(1, 5.0),)

    state.step_back()
    view = state.view()
    assert view.cursor == 0
    assert view.confirmed.position == 1

    feedback = state.choose(0)
    assert feedback.intents == ()
    assert feedback.message.startswith("Ya aplicado")
    assert state.view().cursor == 1

    assert state.choose(0).intents == (UpdateIntent(2, 3.0),)
    feedback = state.choose(0)
    assert feedback.intents == (UpdateIntent(3, 2.0),)
    assert "3 aplicados" in feedback.message


def test_step_back_at_first_segment_stays(state, catalog):
    state.submit("cervezas 5, papas 3", catalog)
    state.step_back()
    assert state.view().cursor == 0


def test_step_back_only_in_multi_mode(state, catalog):
    state.submit("coca cola 2", catalog)
    state.step_back()
    assert state.mode == CommandMode.AWAITING_SINGLE_CHOICE


def test_cancel_keeps_applied_intents(state, catalog):
    state.submit("cervezas 5, papas 3", catalog)
    state.choose(0)

    feedback = state.cancel()
    assert feedback.mode == CommandMode.IDLE
    assert feedback.intents == ()
    assert "1 ya aplicados" in feedback.message
    assert state.view().mode == CommandMode.IDLE


def test_invalid_option_keeps_session(state, catalog):
    state.submit("coca cola 2", catalog)
    feedback = state.choose(4)

    assert feedback.message.startswith("Opción inválida: 5")
    assert state.mode == CommandMode.AWAITING_SINGLE_CHOICE


def test_submit_during_selection_is_rejected(state, catalog):
    state.submit("cervezas 5, papas 3", catalog)
    feedback = state.submit("coca cola 2", catalog)

    assert feedback.mode == CommandMode.AWAITING_MULTI_CHOICE
    assert state.view().segment == ParsedSegment("cervezas", 5.0)


def test_candidates_come_from_catalog_snapshot(state, catalog):
    live = list(catalog)
    state.submit("cervezas 5, papas 3", live)
    live.clear()

    state.choose(0)
    assert [c.position for c in state.view().candidates] == [2]


def test_choose_without_session(state):
    feedback = state.choose(0)
    assert feedback.mode == CommandMode.IDLE
    assert feedback.intents == ()


def test_handle_text_accepts_spoken_choices(state):
    catalog = [
        CatalogEntry(code="A1", name="Agua Mineral", position=0),
        CatalogEntry(code="A2", name="Agua Tónica", position=1),
    ]
    feedback = state.handle_text("agua tres", catalog)
    assert feedback.mode == CommandMode.AWAITING_SINGLE_CHOICE

    feedback = state.handle_text("la dos", catalog)
    assert feedback.intents == (UpdateIntent(1, 3.0),)


def test_handle_text_cancel_and_back_words(state, catalog):
    state.handle_text("cervezas 5, papas 3", catalog)
    state.handle_text("uno", catalog)
    assert state.view().cursor == 1

    state.handle_text("atrás", catalog)
    assert state.view().cursor == 0

    feedback = state.handle_text("Cancelar", catalog)
    assert feedback.mode == CommandMode.IDLE


def test_handle_text_unknown_reply_repeats_prompt(state, catalog):
    state.handle_text("coca cola 2", catalog)
    feedback = state.handle_text("eh", catalog)

    assert "1) Coca Cola 350ml" in feedback.message
    assert state.mode == CommandMode.AWAITING_SINGLE_CHOICE


def test_auto_apply_with_single_confident_candidate(catalog):
    state = CommandState(settings=MatchingSettings(auto_apply_min_score=90))
    feedback = state.submit("coca cola 20", catalog)

    assert feedback.finished
    assert feedback.intents == (UpdateIntent(0, 20.0),)
    assert state.mode == CommandMode.IDLE


def test_auto_apply_skipped_when_ambiguous():
    catalog = [
        CatalogEntry(code="", name="Pepsi", position=0),
        CatalogEntry(code="", name="Pepsi", position=1),
    ]
    state = CommandState(settings=MatchingSettings(auto_apply_min_score=90))
    feedback = state.submit("pepsi 2", catalog)

    assert feedback.mode == CommandMode.AWAITING_SINGLE_CHOICE
    assert feedback.intents == ()


def test_invalid_segment_is_reported_and_the_rest_offered(state, catalog):
    feedback = state.submit("cervezas 0, papas 3", catalog)

    assert feedback.mode == CommandMode.AWAITING_SINGLE_CHOICE
    assert feedback.message.startswith("Cantidad inválida para cervezas: 0")
    assert [c.position for c in state.view().candidates] == [2]
    assert state.choose(0).intents == (UpdateIntent(2, 3.0),)


def test_no_alone_cancels(state, catalog):
    state.handle_text("cervezas 5, papas 3", catalog)
    feedback = state.handle_text("No.", catalog)

    assert feedback.mode == CommandMode.IDLE


def test_no_followed_by_a_choice_is_a_choice(state, catalog):
    state.handle_text("cervezas 5, papas 3", catalog)
    feedback = state.handle_text("no, la uno", catalog)

    assert feedback.intents == (UpdateIntent(1, 5.0),)
    assert state.mode == CommandMode.AWAITING_MULTI_CHOICE


def test_option_number():
    assert option_number(["la", "dos"]) == 2
    assert option_number(["opcion", "3"]) == 3
    assert option_number(["dieciseis"]) == 16
    assert option_number(["eh"]) is None

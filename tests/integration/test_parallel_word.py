"""
Word formatting machine: four independent toggles running in parallel.

Each toggle only understands its own event Enum; every other event is
broadcast to it and ignored.
"""

from enum import Enum
from unittest.mock import MagicMock

import pytest

from statechart.core.machine.machine_builder import MachineBuilder
from statechart.core.machine.machine_type import MachineType
from statechart.core.snapshot import EMPTY_SNAPSHOT, Snapshot
from statechart.core.transition import TransitionInfo


class WordState(Enum):
    LIST = "list"
    UNDERLINE = "underline"
    BOLD = "bold"
    ITALIC = "italic"


class ListState(Enum):
    NONE = "none"
    BULLETS = "bullets"
    NUMBERS = "numbers"


class UnderlineState(Enum):
    OFF = 0
    ON = 1


class BoldState(Enum):
    OFF = 0
    ON = 1


class ItalicState(Enum):
    OFF = 0
    ON = 1


class ListEvent(Enum):
    NONE = "none"
    BULLETS = "bullets"
    NUMBERS = "numbers"


class UnderlineEvent(Enum):
    TOGGLE_UNDERLINE = "toggle_underline"


class BoldEvent(Enum):
    TOGGLE_BOLD = "toggle_bold"


class ItalicEvent(Enum):
    TOGGLE_ITALIC = "toggle_italic"


LIST_TARGETS = {
    ListEvent.NONE: ListState.NONE,
    ListEvent.BULLETS: ListState.BULLETS,
    ListEvent.NUMBERS: ListState.NUMBERS,
}


def list_handler(context, state, event):
    target = LIST_TARGETS[event]
    if target is state:
        return None
    return TransitionInfo(target, lambda: context.changed(WordState.LIST, target))


def toggle_handler(word_state, on, off):
    def handler(context, state, event):
        target = off if state is on else on
        return TransitionInfo(target, lambda: context.changed(word_state, target))

    return handler


@pytest.fixture
def context():
    return MagicMock(name="editor")


@pytest.fixture
def word_machine(context):
    builder = MachineBuilder(WordState, context=context)
    builder.sub_machine(WordState.LIST, ListState, ListEvent).initial(ListState.NONE).transition_handler(list_handler)
    builder.sub_machine(WordState.UNDERLINE, UnderlineState, UnderlineEvent).initial(
        UnderlineState.OFF
    ).transition_handler(toggle_handler(WordState.UNDERLINE, UnderlineState.ON, UnderlineState.OFF))
    builder.sub_machine(WordState.BOLD, BoldState, BoldEvent).initial(BoldState.OFF).transition_handler(
        toggle_handler(WordState.BOLD, BoldState.ON, BoldState.OFF)
    )
    builder.sub_machine(WordState.ITALIC, ItalicState, ItalicEvent).initial(ItalicState.OFF).transition_handler(
        toggle_handler(WordState.ITALIC, ItalicState.ON, ItalicState.OFF)
    )
    return builder.build()


def expected(list_state=ListState.NONE, underline=UnderlineState.OFF, bold=BoldState.OFF, italic=ItalicState.OFF):
    return Snapshot.from_pairs(
        [
            (WordState.LIST, Snapshot.from_value(list_state)),
            (WordState.UNDERLINE, Snapshot.from_value(underline)),
            (WordState.BOLD, Snapshot.from_value(bold)),
            (WordState.ITALIC, Snapshot.from_value(italic)),
        ]
    )


def test_word_machine_is_parallel(word_machine):
    assert word_machine.machine_type == MachineType.PARALLEL


@pytest.mark.parametrize("event", ["", None, ListEvent.BULLETS, BoldEvent.TOGGLE_BOLD])
def test_empty_state_enters_all_states(word_machine, context, event):
    next_state = word_machine.transition(EMPTY_SNAPSHOT, event)
    assert len(next_state.active_values()) == len(WordState)
    assert next_state == expected()
    context.changed.assert_not_called()


def test_none_to_numbers(word_machine):
    state = Snapshot.from_pair(WordState.LIST, Snapshot.from_value(ListState.NONE))
    next_state = word_machine.transition(state, ListEvent.NUMBERS)
    assert next_state == expected(list_state=ListState.NUMBERS)


def test_numbers_to_bullets(word_machine):
    state = Snapshot.from_pair(WordState.LIST, Snapshot.from_value(ListState.NUMBERS))
    next_state = word_machine.transition(state, ListEvent.BULLETS)
    assert next_state == expected(list_state=ListState.BULLETS)


def test_bold_stays_on_for_wrong_event(word_machine, context):
    state = Snapshot.from_pair(WordState.BOLD, Snapshot.from_value(BoldState.ON))
    next_state = word_machine.transition(state, ListEvent.BULLETS)
    # LIST had no recorded state, so it is materialized rather than transitioned
    assert next_state == expected(bold=BoldState.ON)
    context.changed.assert_not_called()


def test_bold_toggles_on(word_machine, context):
    state = Snapshot.from_pair(WordState.BOLD, Snapshot.from_value(BoldState.OFF))
    next_state = word_machine.transition(state, BoldEvent.TOGGLE_BOLD)
    assert next_state == expected(bold=BoldState.ON)
    context.changed.assert_called_once_with(WordState.BOLD, BoldState.ON)


def test_only_matching_branch_changes(word_machine, context):
    state = expected(list_state=ListState.BULLETS, underline=UnderlineState.ON, italic=ItalicState.ON)
    next_state = word_machine.transition(state, ItalicEvent.TOGGLE_ITALIC)
    assert next_state == expected(list_state=ListState.BULLETS, underline=UnderlineState.ON)
    context.changed.assert_called_once_with(WordState.ITALIC, ItalicState.OFF)


def test_fan_out_order_follows_declaration(word_machine):
    next_state = word_machine.transition(EMPTY_SNAPSHOT, None)
    assert next_state.active_values() == list(WordState)


def test_unhandled_list_event_runs_no_side_effect(word_machine, context):
    state = expected(list_state=ListState.BULLETS)
    assert word_machine.transition(state, ListEvent.BULLETS) == state
    context.changed.assert_not_called()


def test_editing_session(word_machine, context):
    snapshot = word_machine.transition(None, None)
    for event in [
        BoldEvent.TOGGLE_BOLD,
        ListEvent.NUMBERS,
        UnderlineEvent.TOGGLE_UNDERLINE,
        BoldEvent.TOGGLE_BOLD,
        "keystroke",
    ]:
        snapshot = word_machine.transition(snapshot, event)
        assert len(snapshot) == len(WordState)
    assert snapshot == expected(list_state=ListState.NUMBERS, underline=UnderlineState.ON)
    assert context.changed.call_count == 4

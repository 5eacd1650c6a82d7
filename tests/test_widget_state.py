import pytest

from storefront_search.widget.state import (
    Close,
    Expand,
    KeyPressed,
    Phase,
    QueryChanged,
    ResultsReceived,
    Scrolled,
    Submit,
    ViewportChanged,
    WidgetState,
    can_submit,
    transition,
    view,
)

DESKTOP = ViewportChanged(width=1280, height=800, screen_height=900)
PHONE = ViewportChanged(width=390, height=760, screen_height=844)
PHONE_WITH_KEYBOARD = ViewportChanged(width=390, height=420, screen_height=844)


def run(*events, state=None):
    state = state or WidgetState()
    for event in events:
        state = transition(state, event)
    return state


@pytest.mark.parametrize(
    "events, phase",
    [
        ([], Phase.MINIMAL),
        ([Expand()], Phase.EXPANDED),
        ([Expand(), QueryChanged("mug"), Submit()], Phase.LOADING),
        ([Expand(), QueryChanged("mug"), Submit(), ResultsReceived(("r",))], Phase.RESULTS),
        ([Expand(), QueryChanged("mug"), Submit(), ResultsReceived(()), Close()], Phase.MINIMAL),
        ([Expand(), QueryChanged("mug"), KeyPressed("Enter")], Phase.LOADING),
        ([Expand(), QueryChanged("mug"), KeyPressed("Enter"), ResultsReceived(()), KeyPressed("Escape")], Phase.MINIMAL),
        ([Expand(), KeyPressed("a")], Phase.EXPANDED),
    ],
)
def test_transition_table(events, phase):
    assert run(*events).phase is phase


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
def test_blank_submit_is_a_no_op(query):
    state = run(Expand(), QueryChanged(query))
    assert not can_submit(state)
    assert transition(state, Submit()) == state


def test_submit_while_loading_is_ignored():
    loading = run(Expand(), QueryChanged("mug"), Submit())
    again = transition(loading, QueryChanged("cup"))
    assert transition(again, Submit()) == again
    assert again.loading


def test_late_results_still_land_after_close():
    state = run(Expand(), QueryChanged("mug"), Submit(), Close(), ResultsReceived(("late",)))
    assert state.phase is Phase.RESULTS
    assert state.results == ("late",)


def test_transitions_do_not_mutate():
    state = WidgetState()
    transition(state, Expand())
    assert state.phase is Phase.MINIMAL


def test_mobile_layout_shows_input():
    state = run(PHONE)
    assert state.mobile
    assert state.phase is Phase.EXPANDED
    assert not view(state).bubble_visible
    assert view(state).interface_active
    # Expand only applies to the desktop bubble
    assert transition(state, Expand()) == state


def test_back_to_desktop_collapses():
    state = run(PHONE, DESKTOP)
    assert not state.mobile
    assert state.phase is Phase.MINIMAL
    assert view(state).bubble_visible


def test_keyboard_detection_is_mobile_only():
    assert run(PHONE_WITH_KEYBOARD).keyboard_open
    assert view(run(PHONE_WITH_KEYBOARD)).container_docked
    assert not run(PHONE_WITH_KEYBOARD, PHONE).keyboard_open
    assert not run(ViewportChanged(width=1280, height=400, screen_height=900)).keyboard_open


def test_layout_change_keeps_search_in_flight():
    state = run(Expand(), QueryChanged("mug"), Submit(), PHONE)
    assert state.phase is Phase.LOADING
    assert state.mobile


def test_scrolling_hides_desktop_widget():
    hidden = run(DESKTOP, Scrolled(250))
    assert not hidden.visible
    assert not view(hidden).container_visible
    assert run(DESKTOP, Scrolled(250), Scrolled(20)).visible


def test_scrolling_back_up_collapses_an_open_panel():
    hidden = run(DESKTOP, Expand(), Scrolled(250))
    assert not hidden.visible
    assert hidden.phase is Phase.EXPANDED

    shown = transition(hidden, Scrolled(20))
    assert shown.visible
    assert shown.phase is Phase.MINIMAL
    assert view(shown).bubble_visible
    assert not view(shown).interface_active


def test_scrolling_keeps_search_in_flight():
    state = run(DESKTOP, Expand(), QueryChanged("mug"), Submit(), Scrolled(250), Scrolled(20))
    assert state.phase is Phase.LOADING
    assert state.visible


def test_scrolling_is_ignored_with_results_open_or_on_mobile():
    with_results = run(Expand(), QueryChanged("mug"), Submit(), ResultsReceived(()), Scrolled(500))
    assert with_results.visible
    assert run(PHONE, Scrolled(500)).visible


def test_view_projection():
    loading = view(run(Expand(), QueryChanged("mug"), Submit()))
    assert loading.loading_active and not loading.results_active

    results = view(run(Expand(), QueryChanged("mug"), Submit(), ResultsReceived(())))
    assert results.results_active and not results.loading_active
    assert not results.body_locked

    mobile_results = view(run(PHONE, QueryChanged("mug"), Submit(), ResultsReceived(())))
    assert mobile_results.body_locked


def test_unknown_event_is_rejected():
    with pytest.raises(TypeError):
        transition(WidgetState(), object())

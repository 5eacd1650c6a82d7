"""
Search widget state machine.

The widget is one immutable WidgetState plus events. `transition` is pure:
the host applies `view(state)` to its UI slots after every event.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

MOBILE_BREAKPOINT = 768
KEYBOARD_HEIGHT_THRESHOLD = 150
SCROLL_HIDE_THRESHOLD = 100


class Phase(str, Enum):
    MINIMAL = "minimal"
    EXPANDED = "expanded"
    LOADING = "loading"
    RESULTS = "results"


@dataclass(frozen=True)
class WidgetState:
    phase: Phase = Phase.MINIMAL
    mobile: bool = False
    keyboard_open: bool = False
    visible: bool = True
    query: str = ""
    results: tuple[Any, ...] = ()

    @property
    def loading(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def show_results(self) -> bool:
        return self.phase is Phase.RESULTS


# --- Events ---

@dataclass(frozen=True)
class Expand:
    pass


@dataclass(frozen=True)
class QueryChanged:
    text: str


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class ResultsReceived:
    results: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Close:
    pass


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class ViewportChanged:
    width: int
    height: int
    screen_height: int


@dataclass(frozen=True)
class Scrolled:
    y: float


Event = Expand | QueryChanged | Submit | ResultsReceived | Close | KeyPressed | ViewportChanged | Scrolled


def can_submit(state: WidgetState) -> bool:
    """Whether Submit would start a request. Blank queries and in-flight searches can't."""
    return bool(state.query.strip()) and not state.loading


def _resting_phase(mobile: bool) -> Phase:
    # on mobile the input is always shown
    return Phase.EXPANDED if mobile else Phase.MINIMAL


def transition(state: WidgetState, event: Event) -> WidgetState:
    if isinstance(event, Expand):
        if state.mobile or state.phase is not Phase.MINIMAL:
            return state
        return replace(state, phase=Phase.EXPANDED, visible=True)

    if isinstance(event, QueryChanged):
        return replace(state, query=event.text)

    if isinstance(event, Submit):
        if not can_submit(state):
            return state
        return replace(state, phase=Phase.LOADING, visible=True, keyboard_open=False)

    if isinstance(event, ResultsReceived):
        # no cancellation: a late response still lands
        return replace(state, phase=Phase.RESULTS, results=tuple(event.results), visible=True)

    if isinstance(event, Close):
        if state.phase is Phase.MINIMAL:
            return state
        return replace(state, phase=Phase.MINIMAL, visible=True)

    if isinstance(event, KeyPressed):
        if event.key == "Enter":
            return transition(state, Submit())
        if event.key == "Escape":
            return transition(state, Close())
        return state

    if isinstance(event, ViewportChanged):
        mobile = event.width < MOBILE_BREAKPOINT
        keyboard_open = mobile and (event.screen_height - event.height) > KEYBOARD_HEIGHT_THRESHOLD
        phase = state.phase
        if mobile != state.mobile and phase in (Phase.MINIMAL, Phase.EXPANDED):
            phase = _resting_phase(mobile)
        return replace(
            state,
            mobile=mobile,
            keyboard_open=keyboard_open,
            phase=phase,
            visible=True if mobile else state.visible,
        )

    if isinstance(event, Scrolled):
        if state.mobile or state.show_results:
            return state
        if event.y > SCROLL_HIDE_THRESHOLD:
            return replace(state, visible=False)
        # back near the top: reappear as the bubble, not an open panel
        phase = Phase.MINIMAL if state.phase is Phase.EXPANDED else state.phase
        return replace(state, visible=True, phase=phase)

    raise TypeError(f"Unknown widget event: {event!r}")


# --- View projection ---

@dataclass(frozen=True)
class WidgetView:
    bubble_visible: bool
    interface_active: bool
    loading_active: bool
    results_active: bool
    body_locked: bool
    container_visible: bool
    container_docked: bool


def view(state: WidgetState) -> WidgetView:
    """What each UI slot should show for a state."""
    minimal = state.phase is Phase.MINIMAL and not state.mobile
    return WidgetView(
        bubble_visible=minimal,
        interface_active=not minimal,
        loading_active=state.loading,
        results_active=state.show_results,
        body_locked=state.show_results and state.mobile,
        container_visible=state.visible,
        # full-width bottom bar while the on-screen keyboard is up
        container_docked=state.mobile and state.keyboard_open,
    )

"""Which quiz controls are usable for a given state."""

from __future__ import annotations

from dataclasses import dataclass

from .cheat import DEFAULT_MAX_CHEATS, cheat_allowed
from .state import QuizState


@dataclass(frozen=True)
class ControlState:
    answer_enabled: bool
    navigation_enabled: bool
    cheat_enabled: bool
    restart_visible: bool


def derive_controls(
    state: QuizState, *, max_cheats: int = DEFAULT_MAX_CHEATS
) -> ControlState:
    """Map ``state`` onto enabled/visible flags.

    An answered question locks the answer controls, a finished quiz also
    locks navigation and offers a restart. Cheating rides on the answer
    controls and is cut off once the cap is reached.
    """

    if state.is_finished:
        answer_enabled, navigation_enabled, restart_visible = False, False, True
    elif state.is_current_answered():
        answer_enabled, navigation_enabled, restart_visible = False, True, False
    else:
        answer_enabled, navigation_enabled, restart_visible = True, True, False

    return ControlState(
        answer_enabled=answer_enabled,
        navigation_enabled=navigation_enabled,
        cheat_enabled=answer_enabled
        and cheat_allowed(state.cheat_count, max_cheats),
        restart_visible=restart_visible,
    )

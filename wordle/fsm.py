from __future__ import annotations

from statemachine import State, StateMachine

from wordle.api.models import GameSession, SessionPhase


class SessionFSM(StateMachine):
    """FSM wrapper around GameSession.

    - phases: created -> in_progress -> won | lost
    - the engine mutates the session; the FSM only guards transitions.
    """

    created = State(SessionPhase.created.value, value=SessionPhase.created.value, initial=True)
    in_progress = State(SessionPhase.in_progress.value, value=SessionPhase.in_progress.value)
    won = State(SessionPhase.won.value, value=SessionPhase.won.value, final=True)
    lost = State(SessionPhase.lost.value, value=SessionPhase.lost.value, final=True)

    bind_target = created.to(in_progress)
    win = in_progress.to(won)
    lose = in_progress.to(lost)

    def __init__(self, session: GameSession):
        self.session = session
        super().__init__(start_value=session.phase.value)

    @property
    def is_terminal(self) -> bool:
        return self.current_state in (self.won, self.lost)

    def sync_phase_to_model(self) -> None:
        self.session.phase = SessionPhase(str(self.current_state.value))

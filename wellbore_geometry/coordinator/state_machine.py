"""State machine guarding the edit cascade.

Uses python-statemachine so that a mutation arriving while another one is
still propagating is refused instead of recursing.

States:
    IDLE: No mutation in progress, edits accepted
    CASCADING: An edit is propagating (volumes, depth links, override merge)
    RENUMBERING: Section ids are being rewritten 1..N
    BULK_LOADING: A whole collection is being replaced (import, restore)

Transitions:
    IDLE -> CASCADING: begin_edit
    CASCADING -> IDLE: finish_edit
    IDLE -> RENUMBERING: begin_renumber (explicit renumber, delete)
    CASCADING -> RENUMBERING: begin_renumber (casing merge removed a section)
    RENUMBERING -> CASCADING: finish_renumber (when entered from a cascade)
    RENUMBERING -> IDLE: finish_renumber (otherwise)
    IDLE -> BULK_LOADING: begin_bulk
    BULK_LOADING -> IDLE: finish_bulk

Any other event raises TransitionNotAllowed; try_transition() turns that into
a logged warning and a False return value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

logger = logging.getLogger(__name__)


@dataclass
class CascadeContext:
    """Model object for the cascade state machine.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model.
    """

    state: str | None = None

    # What the running cascade is about
    section_id: int | None = None
    field_name: str | None = None

    # Renumbering returns to the cascade that started it
    resume_cascade: bool = False

    # Refused nested mutations since creation
    refused_count: int = 0

    def clear(self) -> None:
        self.section_id = None
        self.field_name = None
        self.resume_cascade = False

    def __repr__(self) -> str:
        return f"CascadeContext(state={self.state}, section={self.section_id}, field={self.field_name})"


class TransitionLogListener:
    """Logs every transition at DEBUG level.

    Usage:
        sm = CascadeStateMachine(context=context)
        sm.add_listener(TransitionLogListener())
    """

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.debug(f"[STATE] {source.name} --({event})--> {target.name}")


class CascadeStateMachine(StateMachine):
    """Re-entrancy guard for coordinator mutations.

    States:
        idle: Ready for the next mutation
        cascading: One field edit is propagating
        renumbering: Ids are being rewritten
        bulk_loading: A collection is being replaced wholesale
    """

    # ==========================================================================
    # State Definitions
    # ==========================================================================

    idle = State("Idle", initial=True)
    cascading = State("Cascading")
    renumbering = State("Renumbering")
    bulk_loading = State("BulkLoading")

    # ==========================================================================
    # Transitions
    # ==========================================================================

    begin_edit = idle.to(cascading)
    finish_edit = cascading.to(idle)

    begin_renumber = idle.to(renumbering) | cascading.to(renumbering)
    finish_renumber = renumbering.to(cascading, cond="resumes_cascade") | renumbering.to(
        idle, unless="resumes_cascade"
    )

    begin_bulk = idle.to(bulk_loading)
    finish_bulk = bulk_loading.to(idle)

    # ==========================================================================
    # Guards
    # ==========================================================================

    def resumes_cascade(self) -> bool:
        """Guard: Renumbering was started from inside a cascade."""
        return self.context.resume_cascade

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_idle(self) -> bool:
        return self.idle.is_active

    @property
    def is_cascading(self) -> bool:
        return self.cascading.is_active

    @property
    def is_renumbering(self) -> bool:
        return self.renumbering.is_active

    @property
    def is_bulk_loading(self) -> bool:
        return self.bulk_loading.is_active

    # ==========================================================================
    # Hooks
    # ==========================================================================

    def on_enter_idle(self) -> None:
        self.context.clear()

    def before_begin_edit(self, section_id: int | None = None, field_name: str | None = None) -> None:
        self.context.section_id = section_id
        self.context.field_name = field_name

    def before_begin_renumber(self, source: State) -> None:
        self.context.resume_cascade = source.id == "cascading"

    def on_exit_renumbering(self) -> None:
        self.context.resume_cascade = False

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def __init__(self, context: CascadeContext | None = None, start_value: str | None = None) -> None:
        """Initialize state machine with model pattern.

        Args:
            context: Shared context/model (creates new if None)
            start_value: Optional initial state value
        """
        model = context or CascadeContext()
        super().__init__(model=model, start_value=start_value)

    # ==========================================================================
    # Utility Methods
    # ==========================================================================

    @property
    def context(self) -> CascadeContext:
        return self.model

    def get_state_name(self) -> str:
        return self.current_state.name

    def __repr__(self) -> str:
        return f"CascadeStateMachine(state={self.get_state_name()}, model={self.context!r})"

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name
            **kwargs: Arguments for transition hooks

        Returns:
            True if transition succeeded, False otherwise.
        """
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            self.context.refused_count += 1
            logger.warning(f"Transition '{event}' not allowed from {self.get_state_name()}")
            return False

    @staticmethod
    def create(add_log_listener: bool = True) -> tuple["CascadeStateMachine", CascadeContext]:
        """Factory method to create state machine with context.

        Args:
            add_log_listener: If True, adds TransitionLogListener.

        Returns:
            Tuple of (CascadeStateMachine, CascadeContext)
        """
        context = CascadeContext()
        sm = CascadeStateMachine(context=context)
        if add_log_listener:
            sm.add_listener(TransitionLogListener())
        return sm, context

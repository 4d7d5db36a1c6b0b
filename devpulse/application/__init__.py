from .checkin_workflow import (
    CheckInWorkflow,
    EntryStatus,
    Step,
    SubmissionResult,
    WizardState,
    decrement_bugs,
    increment_bugs,
    next_step,
    previous_step,
    select_satisfaction,
    set_bugs,
    set_comments,
    set_completion,
)

__all__ = [
    "CheckInWorkflow",
    "EntryStatus",
    "Step",
    "SubmissionResult",
    "WizardState",
    "decrement_bugs",
    "increment_bugs",
    "next_step",
    "previous_step",
    "select_satisfaction",
    "set_bugs",
    "set_comments",
    "set_completion",
]

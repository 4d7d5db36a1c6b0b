"""
Check-in Workflow - Wizard State Machine and Submission
========================================================

The wizard walks through four capture steps and a final DONE step:

    COMPLETION -> BUGS -> SATISFACTION -> COMMENTS -> DONE

Wizard state is an immutable value. Transition functions take a state and
return a new one; nothing is kept in module globals.

Submitting from COMMENTS is the only way to reach DONE. It stores the review
locally first, then makes two best-effort outbound calls (sheet append and
insight). Failures of those calls degrade the result but never block it.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum, IntEnum
from typing import Callable, List, Optional

from devpulse.domain import (
    Review,
    SatisfactionLevel,
    WizardError,
    current_period,
    format_timestamp,
    normalize_comments,
    period_label,
    validate_identity,
)
from devpulse.infrastructure.persistence import LocalStore
from devpulse.infrastructure.sheets import SheetsRecorder
from devpulse.infrastructure.llm import InsightService

logger = logging.getLogger(__name__)

COMPLETION_STEP = 5
MIN_COMPLETION = 0
MAX_COMPLETION = 100


class Step(IntEnum):
    COMPLETION = 1
    BUGS = 2
    SATISFACTION = 3
    COMMENTS = 4
    DONE = 5


class EntryStatus(Enum):
    """What the form should show when it is opened."""
    NEEDS_IDENTITY = "needs_identity"
    ALREADY_COMPLETED = "already_completed"
    OPEN = "open"


@dataclass(frozen=True)
class WizardState:
    step: Step = Step.COMPLETION
    completion: int = 80
    bugs: int = 0
    satisfaction: Optional[int] = None
    comments: str = ""


@dataclass(frozen=True)
class SubmissionResult:
    state: WizardState
    review: Review
    reviews: List[Review]
    remote_saved: bool
    insight: str


# ── Transitions ────────────────────────────────────────────────────

def set_completion(state: WizardState, value: int) -> WizardState:
    """Snap to the nearest multiple of 5 within [0, 100]."""
    snapped = int(round(value / COMPLETION_STEP)) * COMPLETION_STEP
    return replace(state, completion=max(MIN_COMPLETION, min(MAX_COMPLETION, snapped)))


def increment_bugs(state: WizardState) -> WizardState:
    return replace(state, bugs=state.bugs + 1)


def decrement_bugs(state: WizardState) -> WizardState:
    return replace(state, bugs=max(0, state.bugs - 1))


def set_bugs(state: WizardState, value: int) -> WizardState:
    return replace(state, bugs=max(0, value))


def select_satisfaction(state: WizardState, level: int) -> WizardState:
    try:
        SatisfactionLevel.from_level(level)
    except ValueError as e:
        raise WizardError(str(e)) from e
    return replace(state, satisfaction=level)


def set_comments(state: WizardState, text: str) -> WizardState:
    return replace(state, comments=text or "")


def next_step(state: WizardState) -> WizardState:
    if state.step == Step.SATISFACTION and state.satisfaction is None:
        raise WizardError("Selecciona tu nivel de satisfacción para continuar.")
    if state.step >= Step.COMMENTS:
        raise WizardError("El check-in se finaliza enviando el formulario.")
    return replace(state, step=Step(state.step + 1))


def previous_step(state: WizardState) -> WizardState:
    if state.step == Step.DONE:
        raise WizardError("El check-in ya fue enviado.")
    if state.step == Step.COMPLETION:
        return state
    return replace(state, step=Step(state.step - 1))


# ── Workflow ───────────────────────────────────────────────────────

class CheckInWorkflow:
    """
    Orchestrates identity, duplicate check and submission.

    Usage:
        workflow = CheckInWorkflow(store, SheetsRecorder(), InsightService())
        if workflow.entry_status(identity) is EntryStatus.OPEN:
            result = workflow.submit(identity, state)
    """

    def __init__(
        self,
        store: LocalStore,
        recorder: SheetsRecorder,
        insights: InsightService,
        clock: Callable[[], datetime] = datetime.now,
        default_completion: int = 80
    ):
        self.store = store
        self.recorder = recorder
        self.insights = insights
        self._clock = clock
        self._default_completion = default_completion

    @property
    def period(self) -> str:
        return current_period(self._clock())

    @property
    def period_label(self) -> str:
        return period_label(self.period)

    def new_state(self) -> WizardState:
        return set_completion(WizardState(), self._default_completion)

    # ── Identity ───────────────────────────────────────────────

    def identity(self) -> Optional[str]:
        return self.store.get_identity()

    def login(self, raw_identity: str) -> str:
        """Validate and remember the identity. Raises InvalidIdentityError."""
        identity = validate_identity(raw_identity)
        self.store.set_identity(identity)
        return identity

    def logout(self):
        self.store.clear_identity()

    # ── Entry guard ────────────────────────────────────────────

    def has_completed(self, identity: str, period: Optional[str] = None) -> bool:
        """
        Local list first. The sheet is only asked when there is no local
        match, since it answers False whenever it cannot be reached.
        """
        period = period or self.period
        if self.store.has_review(identity, period):
            return True
        try:
            return self.recorder.check_exists(identity, period)
        except Exception as e:
            logger.exception(f"Remote existence check failed: {e}")
            return False

    def entry_status(self, identity: Optional[str]) -> EntryStatus:
        if not identity:
            return EntryStatus.NEEDS_IDENTITY
        if self.has_completed(identity):
            return EntryStatus.ALREADY_COMPLETED
        return EntryStatus.OPEN

    # ── Submission ─────────────────────────────────────────────

    def build_review(self, identity: str, state: WizardState) -> Review:
        now = self._clock()
        period = current_period(now)
        return Review(
            identity=identity,
            period=period,
            period_label=period_label(period),
            completion_percent=state.completion,
            bug_count=state.bugs,
            satisfaction=state.satisfaction,
            comments=normalize_comments(state.comments),
            created_at=format_timestamp(now),
        )

    def submit(self, identity: str, state: WizardState) -> SubmissionResult:
        """
        Finish the check-in.

        The local append always happens first; the sheet append and the
        insight are best effort and fall back to False / fallback text.
        """
        if state.step != Step.COMMENTS:
            raise WizardError("El check-in solo puede enviarse desde el último paso.")
        if state.satisfaction is None:
            raise WizardError("Selecciona tu nivel de satisfacción para continuar.")
        identity = validate_identity(identity)

        review = self.build_review(identity, state)
        reviews = self.store.append_review(review)

        try:
            remote_saved = self.recorder.append(review)
        except Exception as e:
            logger.exception(f"Sheet append failed unexpectedly: {e}")
            remote_saved = False
        if not remote_saved:
            logger.warning(f"Review {review.id} is stored locally only")

        try:
            insight = self.insights.request_insight(
                review.completion_percent,
                review.bug_count,
                review.satisfaction,
                review.comments
            )
        except Exception as e:
            logger.exception(f"Insight request failed unexpectedly: {e}")
            insight = self.insights.fallback_message

        return SubmissionResult(
            state=replace(state, step=Step.DONE),
            review=review,
            reviews=reviews,
            remote_saved=remote_saved,
            insight=insight,
        )

    def reviews(self) -> List[Review]:
        return self.store.list_reviews()

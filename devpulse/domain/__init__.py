from .models import (
    CheckInError,
    InvalidIdentityError,
    Review,
    SatisfactionLevel,
    WizardError,
    normalize_comments,
    validate_identity,
)
from .period import current_period, format_timestamp, period_label

__all__ = [
    "CheckInError",
    "InvalidIdentityError",
    "Review",
    "SatisfactionLevel",
    "WizardError",
    "normalize_comments",
    "validate_identity",
    "current_period",
    "format_timestamp",
    "period_label",
]

"""
Check-in Domain Model - Reviews and the Satisfaction Scale
===========================================================

Pure data definitions shared by every layer. No I/O happens here.

A Review is one developer's monthly check-in. Reviews are append-only:
once created by the submission workflow they are never edited or deleted.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CheckInError(Exception):
    """Base exception for check-in errors surfaced to the user."""
    pass


class InvalidIdentityError(CheckInError):
    """Raised when the entered identity is not email-like."""
    pass


class WizardError(CheckInError):
    """Raised on an invalid wizard transition or wizard input."""
    pass


class SatisfactionLevel(Enum):
    """
    Fixed five-value satisfaction scale.

    Each member carries (level, emoji, label, css color).
    """
    VERY_UNSATISFIED = (1, "😫", "Muy Insatisfecho", "#ef4444")
    UNSATISFIED = (2, "😕", "Insatisfecho", "#f97316")
    NEUTRAL = (3, "😐", "Neutral", "#eab308")
    SATISFIED = (4, "🙂", "Satisfecho", "#4ade80")
    VERY_SATISFIED = (5, "🤩", "Muy Satisfecho", "#16a34a")

    def __init__(self, level: int, emoji: str, label: str, color: str):
        self.level = level
        self.emoji = emoji
        self.label = label
        self.color = color

    @classmethod
    def from_level(cls, level: int) -> "SatisfactionLevel":
        for member in cls:
            if member.level == level:
                return member
        raise ValueError(f"Satisfaction level must be between 1 and 5, got {level}")


def validate_identity(raw: str) -> str:
    """
    Normalize and validate a developer identity.

    Only the presence of '@' is checked; anything beyond that is
    left to the organization's own directory.
    """
    identity = (raw or "").strip()
    if "@" not in identity:
        raise InvalidIdentityError(f"Invalid email: {raw!r}")
    return identity


def normalize_comments(text: Optional[str]) -> Optional[str]:
    """Trim free text; empty input becomes None."""
    if text is None:
        return None
    trimmed = text.strip()
    return trimmed or None


@dataclass(frozen=True)
class Review:
    """One submitted monthly check-in."""
    identity: str
    period: str
    period_label: str
    completion_percent: int
    bug_count: int
    satisfaction: int
    created_at: str
    comments: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def satisfaction_level(self) -> Optional[SatisfactionLevel]:
        """Scale entry for this review, or None for a level outside 1-5."""
        try:
            return SatisfactionLevel.from_level(self.satisfaction)
        except ValueError:
            return None

    @property
    def satisfaction_label(self) -> str:
        level = self.satisfaction_level
        return level.label if level else str(self.satisfaction)

    @property
    def satisfaction_emoji(self) -> str:
        level = self.satisfaction_level
        return level.emoji if level else str(self.satisfaction)

    def to_dict(self) -> dict:
        """Serialize using the stored field names."""
        data = {
            "id": self.id,
            "developerEmail": self.identity,
            "completionPercentage": self.completion_percent,
            "bugCount": self.bug_count,
            "satisfaction": self.satisfaction,
            "timestamp": self.created_at,
            "monthId": self.period,
            "monthName": self.period_label,
        }
        if self.comments:
            data["comments"] = self.comments
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        return cls(
            id=data["id"],
            identity=data["developerEmail"],
            completion_percent=int(data["completionPercentage"]),
            bug_count=int(data["bugCount"]),
            satisfaction=int(data["satisfaction"]),
            comments=normalize_comments(data.get("comments")),
            created_at=data.get("timestamp", ""),
            period=data["monthId"],
            period_label=data.get("monthName", ""),
        )

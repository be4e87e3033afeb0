"""Request objects for the application's use cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AnalyzeDrawingCommand:
    """Ask for one drawing to be analysed."""

    user_id: str
    drawing_type: str
    image_data: bytes
    question: Optional[str] = None

    def __post_init__(self) -> None:
        self.user_id = str(self.user_id)
        self.drawing_type = str(self.drawing_type)
        self.image_data = bytes(self.image_data)


@dataclass
class GenerateApiKeyCommand:
    """Ask for a new API key."""

    description: Optional[str] = None
    expires_in_days: Optional[int] = None


@dataclass
class RotateApiKeyCommand:
    """Replace an API key with a fresh one, optionally revoking the old one."""

    old_key: str
    revoke_old: bool
    expires_in_days: Optional[int] = None

    def __post_init__(self) -> None:
        self.old_key = str(self.old_key)


@dataclass
class SetQuotaCommand:
    """Set a user's daily request limit."""

    user_id: str
    daily_limit: int

    def __post_init__(self) -> None:
        self.user_id = str(self.user_id)
# app/clients/notifications.py
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

logger = logging.getLogger(__name__)

_LEVELS = {
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class Toast:
    message: str
    kind: str
    shown_at: datetime


class Notifier:
    """User-visible notifications ("toasts").

    Every toast is logged and kept in ``history`` so a front end can draw the
    latest one.
    """

    def __init__(self, max_history: int = 50):
        self.history: List[Toast] = []
        self.max_history = max_history

    def show(self, message: str, kind: str = "success") -> Toast:
        toast = Toast(message=message, kind=kind, shown_at=datetime.now())
        self.history.append(toast)
        del self.history[:-self.max_history]
        logger.log(_LEVELS.get(kind, logging.INFO), f"[{kind}] {message}")
        return toast

    @property
    def last(self) -> Optional[Toast]:
        return self.history[-1] if self.history else None


__all__ = ["Notifier", "Toast"]

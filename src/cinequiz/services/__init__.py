# src/cinequiz/services/__init__.py
"""Business logic services for the CineQuiz application."""

from .attempts import AttemptTracker
from .mailer import Mailer, MailDeliveryError
from .participation import ParticipationGate

__all__ = [
    "AttemptTracker",
    "Mailer",
    "MailDeliveryError",
    "ParticipationGate",
]

"""Async client for CineQuiz: API wrapper, game controller and wallet connector."""

from .api import ApiError, BypassOptions, CineQuizClient
from .game import ErrorBanner, GameController
from .session import GameSession
from .wallet import (
    JsonPreferenceStore,
    MemoryPreferenceStore,
    WalletConnector,
    WalletProvider,
    WalletState,
)

__all__ = [
    "ApiError",
    "BypassOptions",
    "CineQuizClient",
    "ErrorBanner",
    "GameController",
    "GameSession",
    "JsonPreferenceStore",
    "MemoryPreferenceStore",
    "WalletConnector",
    "WalletProvider",
    "WalletState",
]

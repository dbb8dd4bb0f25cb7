"""Wallet connector: a two-state machine over an injected wallet provider.

Transitions happen only through ``connect()``/``disconnect()`` or through the
provider's own ``connect``/``disconnect`` events. Each transition notifies the
subscribed observers with the new state and address.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Protocol

from cinequiz.client.api import CineQuizClient

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_TIMEOUT_SECONDS = 30 * 60
RECONNECT_PREFERENCE_KEY = "wallet.reconnect"


def _short(address: str | None) -> str:
    if not address:
        return ""
    return f"{address[:4]}...{address[-4:]}"


class WalletState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class WalletProvider(Protocol):
    """What the connector needs from a wallet extension."""

    async def connect(self, only_if_trusted: bool = False) -> str: ...

    async def disconnect(self) -> None: ...

    def on(self, event: str, handler: Callable[..., Any]) -> None: ...


class PreferenceStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryPreferenceStore:
    """Preferences kept for the lifetime of the process."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonPreferenceStore:
    """Preferences persisted to a small JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences at %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


Observer = Callable[[WalletState, str | None], Awaitable[None] | None]


class WalletConnector:
    """Connects a wallet provider and tracks the resulting address."""

    def __init__(
        self,
        provider: WalletProvider,
        client: CineQuizClient,
        preferences: PreferenceStore | None = None,
        *,
        inactivity_timeout: float = DEFAULT_INACTIVITY_TIMEOUT_SECONDS,
    ) -> None:
        self.provider = provider
        self.client = client
        self.preferences = preferences or MemoryPreferenceStore()
        self.inactivity_timeout = inactivity_timeout
        self.state = WalletState.DISCONNECTED
        self.address: str | None = None
        self._observers: list[Observer] = []
        self._inactivity_handle: asyncio.TimerHandle | None = None
        self._pending: set[asyncio.Task[None]] = set()

        provider.on("connect", self._on_provider_connect)
        provider.on("disconnect", self._on_provider_disconnect)

    @property
    def connected(self) -> bool:
        return self.state is WalletState.CONNECTED

    def subscribe(self, observer: Observer) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def connect(self) -> str:
        """Connect the wallet after passing the server's connect throttle.

        Raises:
            ApiError: The throttle rejected the attempt; state is unchanged.
        """
        await self.client.wallet_connect()
        address = await self.provider.connect()
        self.preferences.set(RECONNECT_PREFERENCE_KEY, True)
        await self._transition(WalletState.CONNECTED, str(address))
        return self.address or ""

    async def disconnect(self) -> None:
        await self.provider.disconnect()
        self.preferences.remove(RECONNECT_PREFERENCE_KEY)
        await self._transition(WalletState.DISCONNECTED, None)

    async def restore(self) -> bool:
        """Reconnect silently when the player connected on a previous visit."""
        if not self.preferences.get(RECONNECT_PREFERENCE_KEY):
            return False
        try:
            address = await self.provider.connect(only_if_trusted=True)
        except Exception as exc:
            logger.info("Silent wallet reconnect declined: %s", exc)
            self.preferences.remove(RECONNECT_PREFERENCE_KEY)
            return False
        await self._transition(WalletState.CONNECTED, str(address))
        return True

    def touch(self) -> None:
        """Record player activity, pushing back the inactivity disconnect."""
        if self.connected:
            self._arm_inactivity_timer()

    async def close(self) -> None:
        self._cancel_inactivity_timer()
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()
        self._observers.clear()

    def _on_provider_connect(self, address: Any) -> None:
        self._spawn(self._transition(WalletState.CONNECTED, str(address)))

    def _on_provider_disconnect(self, *_: Any) -> None:
        self._spawn(self._transition(WalletState.DISCONNECTED, None))

    def _spawn(self, coro: Awaitable[None]) -> None:
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _transition(self, state: WalletState, address: str | None) -> None:
        if state is self.state and address == self.address:
            return
        self.state = state
        self.address = address
        if state is WalletState.CONNECTED:
            self._arm_inactivity_timer()
            logger.info("Wallet connected: %s", _short(address))
        else:
            self._cancel_inactivity_timer()
            logger.info("Wallet disconnected")
        for observer in list(self._observers):
            try:
                result = observer(state, address)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.warning("Wallet observer failed: %s", exc)

    def _arm_inactivity_timer(self) -> None:
        self._cancel_inactivity_timer()
        loop = asyncio.get_running_loop()
        self._inactivity_handle = loop.call_later(self.inactivity_timeout, self._on_inactive)

    def _cancel_inactivity_timer(self) -> None:
        if self._inactivity_handle is not None:
            self._inactivity_handle.cancel()
            self._inactivity_handle = None

    def _on_inactive(self) -> None:
        self._inactivity_handle = None
        logger.info("Disconnecting wallet after %ss of inactivity", self.inactivity_timeout)
        self.preferences.remove(RECONNECT_PREFERENCE_KEY)
        self._spawn(self._disconnect_quietly())

    async def _disconnect_quietly(self) -> None:
        try:
            await self.provider.disconnect()
        except Exception as exc:
            logger.warning("Provider disconnect failed: %s", exc)
        await self._transition(WalletState.DISCONNECTED, None)


__all__ = [
    "JsonPreferenceStore",
    "MemoryPreferenceStore",
    "PreferenceStore",
    "WalletConnector",
    "WalletProvider",
    "WalletState",
]

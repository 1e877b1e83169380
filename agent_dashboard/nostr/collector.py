"""
Relay event collector: one REQ subscription, bounded collection window.

Connects to a Nostr relay over WebSocket, issues a multi-filter REQ and gathers
every EVENT for the subscription until either the relay sends EOSE (end of
stored events) or max_wait_ms elapses, whichever comes first. Before returning,
the subscription is closed (CLOSE) and the connection is closed, each exactly
once; failures while terminating are logged and swallowed.

The EOSE reader and the deadline timer race on a single CollectionWindow. The
first to settle it wins; the loser (a late EVENT, EOSE or timer fire) is a no-op.

Only the initial connection (and the REQ send) can fail the call, with
RelayConnectionError. A connection dropped mid-collection ends the window and
returns what was gathered. Events are returned in delivery order with no
de-duplication across filters.
"""

from __future__ import annotations

import asyncio
import json
import time
import uuid
from typing import Any, Awaitable, Callable, Sequence

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from agent_dashboard.core.exceptions import RelayConnectionError
from agent_dashboard.dashboard_logging import get_logger
from agent_dashboard.nostr.models import RawEvent, RelayFilter

logger = get_logger(__name__)

DEFAULT_MAX_WAIT_MS = 5000
DEFAULT_OPEN_TIMEOUT_SEC = 10.0
_WS_CLOSE_TIMEOUT = 5.0

SETTLED_EOSE = "eose"
SETTLED_TIMEOUT = "timeout"
SETTLED_CLOSED = "closed"
SETTLED_DISCONNECTED = "disconnected"
SETTLED_ERROR = "error"

# connect(url, **kwargs) -> awaitable connection with send/recv/close
ConnectFn = Callable[..., Awaitable[Any]]


class CollectionWindow:
    """
    Single-assignment completion state for one collection.

    settle() resolves the window with a reason the first time and returns True;
    every later call returns False and changes nothing.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future[str] = loop.create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    @property
    def reason(self) -> str | None:
        return self._future.result() if self._future.done() else None

    def settle(self, reason: str) -> bool:
        if self._future.done():
            return False
        self._future.set_result(reason)
        return True

    async def wait(self) -> str:
        return await self._future


def _new_subscription_id() -> str:
    return uuid.uuid4().hex[:16]


def _decode_message(raw: Any) -> list[Any] | None:
    """Relay messages are JSON arrays ["TYPE", ...]; anything else is ignored."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        msg = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(msg, list) or not msg or not isinstance(msg[0], str):
        return None
    return msg


class RelayCollector:
    """Collects stored events from one relay per call; no state kept between calls."""

    def __init__(
        self,
        relay_url: str,
        *,
        connect: ConnectFn | None = None,
        open_timeout: float = DEFAULT_OPEN_TIMEOUT_SEC,
    ) -> None:
        if not relay_url.strip():
            raise ValueError("relay_url must be non-empty")
        self._relay_url = relay_url.strip()
        self._connect = connect or websockets.connect
        self._open_timeout = open_timeout

    @property
    def relay_url(self) -> str:
        return self._relay_url

    async def collect(
        self,
        filters: Sequence[RelayFilter],
        max_wait_ms: int = DEFAULT_MAX_WAIT_MS,
    ) -> list[RawEvent]:
        """
        Subscribe with all filters and return the events delivered before EOSE
        or the deadline. Raises RelayConnectionError if the relay is unreachable.
        """
        if not filters:
            raise ValueError("at least one filter is required")
        started = time.monotonic()
        ws = await self._open()
        sub_id = _new_subscription_id()
        loop = asyncio.get_running_loop()
        window = CollectionWindow(loop)
        collected: list[RawEvent] = []
        timer: asyncio.TimerHandle | None = None
        reader: asyncio.Task[None] | None = None
        subscribed = False
        try:
            request = ["REQ", sub_id, *(f.to_dict() for f in filters)]
            try:
                await ws.send(json.dumps(request))
            except (ConnectionClosed, OSError) as e:
                raise RelayConnectionError(self._relay_url, str(e)) from e
            subscribed = True
            timer = loop.call_later(max(0, max_wait_ms) / 1000.0, window.settle, SETTLED_TIMEOUT)
            reader = asyncio.create_task(self._read(ws, sub_id, window, collected))
            reason = await window.wait()
        finally:
            if timer is not None:
                timer.cancel()
            if reader is not None and not reader.done():
                reader.cancel()
                try:
                    await reader
                except asyncio.CancelledError:
                    pass
            await self._terminate(ws, sub_id, subscribed)

        logger.info(
            "relay_collect_done",
            relay=self._relay_url,
            subscription_id=sub_id,
            reason=reason,
            events=len(collected),
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return collected

    async def _open(self) -> Any:
        try:
            ws = await self._connect(
                self._relay_url,
                open_timeout=self._open_timeout,
                close_timeout=_WS_CLOSE_TIMEOUT,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            logger.warning("relay_connect_failed", relay=self._relay_url, error=str(e))
            raise RelayConnectionError(self._relay_url, str(e) or type(e).__name__) from e
        logger.debug("relay_connected", relay=self._relay_url)
        return ws

    async def _read(
        self,
        ws: Any,
        sub_id: str,
        window: CollectionWindow,
        collected: list[RawEvent],
    ) -> None:
        """Route relay messages for sub_id until the window settles."""
        try:
            while not window.settled:
                msg = _decode_message(await ws.recv())
                if msg is None or window.settled:
                    continue
                kind = msg[0]
                if kind == "EVENT" and len(msg) >= 3 and msg[1] == sub_id:
                    if isinstance(msg[2], dict):
                        collected.append(RawEvent.from_dict(msg[2]))
                elif kind == "EOSE" and len(msg) >= 2 and msg[1] == sub_id:
                    window.settle(SETTLED_EOSE)
                elif kind == "CLOSED" and len(msg) >= 2 and msg[1] == sub_id:
                    logger.warning(
                        "relay_subscription_closed",
                        relay=self._relay_url,
                        subscription_id=sub_id,
                        message=msg[2] if len(msg) > 2 else "",
                    )
                    window.settle(SETTLED_CLOSED)
                elif kind == "NOTICE":
                    logger.info(
                        "relay_notice",
                        relay=self._relay_url,
                        message=msg[1] if len(msg) > 1 else "",
                    )
        except ConnectionClosed as e:
            logger.warning(
                "relay_disconnected",
                relay=self._relay_url,
                subscription_id=sub_id,
                error=str(e),
            )
            window.settle(SETTLED_DISCONNECTED)
        except Exception as e:
            logger.warning(
                "relay_read_error",
                relay=self._relay_url,
                subscription_id=sub_id,
                error=str(e),
            )
            window.settle(SETTLED_ERROR)

    async def _terminate(self, ws: Any, sub_id: str, subscribed: bool) -> None:
        """Send CLOSE for the subscription, then close the socket; never raises."""
        if subscribed:
            try:
                await ws.send(json.dumps(["CLOSE", sub_id]))
            except Exception as e:
                logger.debug(
                    "relay_unsubscribe_failed",
                    relay=self._relay_url,
                    subscription_id=sub_id,
                    error=str(e),
                )
        try:
            await ws.close()
        except Exception as e:
            logger.debug("relay_close_failed", relay=self._relay_url, error=str(e))

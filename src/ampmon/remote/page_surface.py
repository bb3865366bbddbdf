"""Capability contract for the browser page hosting the amplifier UI.

A surface only needs two things: a ``ready`` flag driven by the browser's
navigation-completed event, and ``run_query(script)`` which evaluates a
JavaScript expression in the current page and returns its result as text.
Backends live in :mod:`webengine_surface` (Qt) and :mod:`playwright_surface`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class SurfaceError(RuntimeError):
    """Base class for failures talking to the page."""


class SurfaceNotReady(SurfaceError):
    """The page has not finished loading (or has been torn down)."""


class QueryTimeout(SurfaceError):
    """A page query did not complete within the configured timeout."""


@runtime_checkable
class PageSurface(Protocol):
    @property
    def ready(self) -> bool: ...

    async def run_query(self, script: str) -> Optional[str]: ...


def unwrap_script_result(raw: Optional[str]) -> Optional[str]:
    """
    Remove one layer of string quoting some browsers add to script results.

    Only applies when *raw* itself is a quoted string: the surrounding quotes
    are dropped and ``\\"`` / ``\\\\`` are unescaped. Anything else is returned
    unchanged.
    """
    if not raw:
        return raw
    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        raw = raw[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return raw


def decode_script_json(raw: Optional[str]) -> Any:
    """Unwrap and JSON-decode a script result; blank results decode to ``None``."""
    cleaned = unwrap_script_result(raw)
    if cleaned is None or not cleaned.strip():
        return None
    return json.loads(cleaned)


class SerializedSurface:
    """
    Single-writer wrapper around a :class:`PageSurface`.

    Every query takes the same lock and is bounded by *timeout_s*, so the poll
    loop and user-triggered clicks never interleave on one page handle.
    """

    def __init__(self, surface: PageSurface, *, timeout_s: float = 3.0) -> None:
        self._surface = surface
        self._timeout_s = float(timeout_s)
        self._lock: asyncio.Lock | None = None

    @property
    def surface(self) -> PageSurface:
        return self._surface

    @property
    def ready(self) -> bool:
        return bool(self._surface.ready)

    def _get_lock(self) -> asyncio.Lock:
        # Created lazily so the lock binds to the loop that first uses it.
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def run_query(self, script: str) -> Optional[str]:
        async with self._get_lock():
            if not self._surface.ready:
                raise SurfaceNotReady("page is not loaded")
            try:
                return await asyncio.wait_for(
                    self._surface.run_query(script), timeout=self._timeout_s
                )
            except asyncio.TimeoutError as exc:
                raise QueryTimeout(
                    f"page query timed out after {self._timeout_s:.1f} s"
                ) from exc

    async def query_json(self, script: str) -> Any:
        return decode_script_json(await self.run_query(script))

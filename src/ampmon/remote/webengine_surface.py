"""Qt WebEngine page used as the rendering surface of the desktop GUI."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

from PySide6.QtCore import QObject, QUrl, Signal, Slot
from PySide6.QtWebEngineCore import QWebEnginePage

logger = logging.getLogger(__name__)


class WebEngineSurface(QObject):
    """
    Wrap a :class:`QWebEnginePage` behind the ``ready``/``run_query`` contract.

    ``ready`` follows the page's load signals: cleared when a navigation
    starts, set from ``loadFinished(ok)``. Script results arrive through the
    ``runJavaScript`` callback and are handed to the awaiting coroutine via a
    future on the running asyncio loop (``QtAsyncio`` in the GUI).
    """

    ready_changed = Signal(bool)

    def __init__(
        self,
        page: QWebEnginePage | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._page = page if page is not None else QWebEnginePage(self)
        self._ready = False
        self._page.loadStarted.connect(self._on_load_started)
        self._page.loadFinished.connect(self._on_load_finished)

    @property
    def page(self) -> QWebEnginePage:
        return self._page

    @property
    def ready(self) -> bool:
        return self._ready

    def navigate(self, url: str) -> None:
        logger.info("Loading amplifier page %s", url)
        self._page.load(QUrl(url))

    def reload(self) -> None:
        self._page.triggerAction(QWebEnginePage.WebAction.Reload)

    @Slot()
    def _on_load_started(self) -> None:
        self._set_ready(False)

    @Slot(bool)
    def _on_load_finished(self, ok: bool) -> None:
        if not ok:
            logger.warning("Amplifier page failed to load: %s", self._page.url().toString())
        self._set_ready(bool(ok))

    def _set_ready(self, ready: bool) -> None:
        if ready == self._ready:
            return
        self._ready = ready
        self.ready_changed.emit(ready)

    async def run_query(self, script: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Optional[str]] = loop.create_future()

        def _on_result(result: Any) -> None:
            if future.done():
                return
            if result is None or isinstance(result, str):
                future.set_result(result)
            else:
                future.set_result(json.dumps(result))

        self._page.runJavaScript(script, 0, _on_result)
        return await future

"""Scrape every ``w-val`` tagged element of the live page into a flat mapping."""

from __future__ import annotations

import json
import logging
from typing import Dict

from .page_surface import SerializedSurface

logger = logging.getLogger(__name__)

DEFAULT_MARKER_ATTRIBUTE = "w-val"

_SCRAPE_TEMPLATE = """
(() => {
  const attr = %(attr)s;
  const nodes = document.querySelectorAll('[' + attr + ']');
  const out = {};
  nodes.forEach(n => {
    const p = n.getAttribute(attr); if (!p) return;
    out[p] = (n.innerText || '').replace(/\\s+/g, ' ').trim();
  });
  return JSON.stringify(out);
})();
"""


def build_scrape_script(marker_attribute: str = DEFAULT_MARKER_ATTRIBUTE) -> str:
    return _SCRAPE_TEMPLATE % {"attr": json.dumps(marker_attribute)}


def normalize_text(text: str) -> str:
    """Collapse whitespace runs and trim, mirroring the in-page normalization."""
    return " ".join(str(text).split())


class PageExtractor:
    """Read-only scraper producing one raw sample per call."""

    def __init__(
        self,
        surface: SerializedSurface,
        *,
        marker_attribute: str = DEFAULT_MARKER_ATTRIBUTE,
    ) -> None:
        self._surface = surface
        self._script = build_scrape_script(marker_attribute)

    async def extract(self) -> Dict[str, str]:
        """
        Return ``{key: displayed text}`` for the current page.

        Returns ``{}`` when the page is not ready or nothing is tagged. Query and
        decode errors propagate; the poll loop treats them as a skipped cycle.
        """
        if not self._surface.ready:
            return {}

        payload = await self._surface.query_json(self._script)
        if not isinstance(payload, dict):
            if payload is not None:
                logger.debug("Unexpected scrape payload type %s", type(payload).__name__)
            return {}

        sample: Dict[str, str] = {}
        for key, value in payload.items():
            if not key:
                continue
            sample[str(key)] = normalize_text("" if value is None else value)
        return sample

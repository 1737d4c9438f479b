# tests/conftest.py
import asyncio
import logging
from pathlib import Path

import pytest

from mail_auditor.dom.builder import DOMBuilder
from mail_auditor.dom.core import PassContext
from mail_auditor.errors import ProbeError
from mail_auditor.model import AnalysisOptions


class FakeHttpService:
    """Nep-HTTP-service: geen netwerk, statussen en groottes komen uit dicts."""

    def __init__(self, statuses=None, sizes=None, delay=0.0):
        self.statuses = statuses or {}
        self.sizes = sizes or {}
        self.delay = delay
        self.calls = []
        self.cancelled = 0

    async def check_reachable(self, url):
        self.calls.append(url)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        status = self.statuses.get(url, 200)
        if isinstance(status, Exception):
            raise status
        return 200 <= status < 400

    async def fetch_content_length(self, url):
        self.calls.append(url)
        if url not in self.sizes:
            raise ProbeError(url, "HTTP 404")
        return self.sizes[url]


@pytest.fixture
def fake_http():
    return FakeHttpService()


@pytest.fixture
def make_ctx():
    """Bouwt een PassContext voor een HTML-string, zoals de engine dat doet."""

    def _make(html, http_service=None, base_path=None, **option_kwargs):
        doc = DOMBuilder().parse_doc(html, base_path=base_path)
        options = AnalysisOptions(base_path=base_path, **option_kwargs)
        return PassContext(
            doc=doc,
            options=options,
            logger=logging.getLogger("tests"),
            http_service=http_service,
        )

    return _make


@pytest.fixture
def offline_options():
    """Opties zonder netwerk en zonder systeemwoordenboek."""
    return AnalysisOptions(
        spelling_strategy="heuristic",
        probe_links=False,
        resolve_image_sizes=False,
    )


@pytest.fixture
def tiny_dictionary(tmp_path) -> Path:
    """Een minimaal Hunspell-woordenboek (.aff + .dic) in een tijdelijke map."""
    stem = tmp_path / "en_TEST"
    stem.with_suffix(".aff").write_text("SET UTF-8\nTRY esianrtolcdugmphbyfvkwz\n", encoding="utf-8")
    words = ["the", "cat", "sat", "on", "mat", "hello", "world", "email", "campaign"]
    stem.with_suffix(".dic").write_text(f"{len(words)}\n" + "\n".join(words) + "\n", encoding="utf-8")
    return stem

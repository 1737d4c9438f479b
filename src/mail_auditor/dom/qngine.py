# src/mail_auditor/dom/qngine.py
import asyncio
import inspect
import logging
from contextlib import AsyncExitStack
from typing import Any, Dict, Optional, Union

from link_prober.services.http_request_service import HttpRequestService
from link_prober.services.user_agent_service import generate_default_user_agent

from .builder import DOMBuilder
from .core import PassContext, PassDefinition
from .models import HTMLDocument
from .registry import PassRegistry
from ..errors import FatalAnalysisError
from ..model import AnalysisOptions, AnalysisReport

logger = logging.getLogger(__name__)


class QNGINE:
    """
    Quality Engine (QNGINE) for auditing HTML emails.

    Runs every registered pass concurrently over one parsed document and merges
    their outputs into a single AnalysisReport. A pass that fails degrades to
    empty fields; fatal errors (input, parse, dictionary) abort the whole run.
    """

    def __init__(self, options: Optional[AnalysisOptions] = None):
        """Initializes the engine by discovering and loading all available passes."""
        PassRegistry.discover()
        self.passes = PassRegistry.get_all_passes()
        self.options = options or AnalysisOptions()
        self.logger = self.options.logger or logger

    async def run(self, doc: HTMLDocument) -> AnalysisReport:
        """
        Runs the full pass suite on a parsed HTMLDocument.

        Args:
            doc (HTMLDocument): The parsed document.

        Returns:
            AnalysisReport: The frozen, assembled report.
        """
        async with AsyncExitStack() as stack:
            http_service = await self._open_http_service(stack)
            ctx = PassContext(doc=doc, options=self.options, logger=self.logger, http_service=http_service)

            tasks = [
                asyncio.ensure_future(self._run_pass(defn, ctx))
                for defn in self.passes
            ]
            try:
                results = await asyncio.gather(*tasks)
            except FatalAnalysisError:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        fields: Dict[str, Any] = {}
        for result in results:
            fields.update(result)

        return AnalysisReport(**fields)

    async def _open_http_service(self, stack: AsyncExitStack):
        """Returns the injected http service, or a session-scoped one when any probing is enabled."""
        if self.options.http_service is not None:
            return self.options.http_service
        if not (self.options.probe_links or self.options.resolve_image_sizes):
            return None

        service_config = {
            "session": {
                "concurrency": self.options.probe_concurrency,
                "time_out": self.options.probe_timeout,
            }
        }
        user_agent = self.options.user_agent or generate_default_user_agent()
        return await stack.enter_async_context(HttpRequestService(service_config, user_agent))

    async def _run_pass(self, defn: PassDefinition, ctx: PassContext) -> Dict[str, Any]:
        """Executes one pass, isolating any non-fatal failure."""
        try:
            if inspect.iscoroutinefunction(defn.runner):
                result = await defn.runner(ctx)
            else:
                result = defn.runner(ctx)
        except FatalAnalysisError:
            raise
        except Exception as e:
            self.logger.error(
                "Pass '%s' failed, its fields stay empty: %s", defn.name, e,
                exc_info=True, extra={"analysis_pass": defn.name}
            )
            return {}

        unknown = set(result) - set(defn.fields)
        if unknown:
            self.logger.warning("Pass '%s' returned undeclared fields: %s", defn.name, sorted(unknown))
        return {k: v for k, v in result.items() if k in defn.fields}


async def analyze_html(
        html: Union[str, bytes],
        options: Optional[AnalysisOptions] = None
) -> AnalysisReport:
    """
    Canonical entry point: (html, options) -> report.

    Cancelling the awaiting task cancels every in-flight probe and the
    dictionary load, and closes the HTTP session.
    """
    options = options or AnalysisOptions()
    doc = DOMBuilder().parse_doc(html, base_path=options.base_path)
    return await QNGINE(options).run(doc)


def analyze_html_sync(
        html: Union[str, bytes],
        options: Optional[AnalysisOptions] = None
) -> AnalysisReport:
    """Blocking wrapper around analyze_html for scripts and WSGI views."""
    return asyncio.run(analyze_html(html, options))

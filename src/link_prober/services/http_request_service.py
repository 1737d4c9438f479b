# src/link_prober/services/http_request_service.py
import asyncio
import logging
import time
from typing import Dict, Optional

import aiohttp

from mail_auditor.errors import ProbeError

logger = logging.getLogger(__name__)


class HttpRequestService:
    """
    Central service for executing HEAD probes.
    Manages the aiohttp session, concurrency (semaphore), timeouts and error handling.
    Never retries: one request per call.
    """

    def __init__(self, config: Dict, user_agent: str):
        self.config = config
        self.user_agent = user_agent

        session_config = config.get('session', {})
        self.max_concurrency = int(session_config.get('concurrency', 10))
        self.timeout = float(session_config.get('time_out', 5.0))
        self.max_redirects = int(session_config.get('max_redirects', 10))

        self.semaphore = asyncio.Semaphore(self.max_concurrency)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
            default_headers = {
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.user_agent
            }
            self.session = aiohttp.ClientSession(
                timeout=timeout_obj, headers=default_headers
            )
            logger.debug("HttpRequestService: Session initialized.")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("HttpRequestService: Session closed.")

    async def perform_request(self, url: str, method: str = "HEAD") -> dict:
        """
        Main entry point. Wraps execution in the semaphore and error handling.

        Status conventions for failures that never produced a response:
        -1 network error or timeout, -2 unexpected error, -99 unsupported call.
        """
        start_time = time.perf_counter()

        if method.upper() != "HEAD":
            return {"status": -99, "error": f"Method {method} not supported"}

        if not self.session or self.session.closed:
            await self.initialize()

        try:
            async with self.semaphore:
                response_data = await self._execute_head(url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            response_data = {"status": -1, "error": str(e) or type(e).__name__}
        except Exception as e:
            response_data = {"status": -2, "error": str(e)}

        response_data["elapsed_time"] = round((time.perf_counter() - start_time), 4)
        return response_data

    async def _execute_head(self, url: str) -> dict:
        """
        Handles a lightweight reachability check:
        1. Sends HEAD request.
        2. Follows redirects up to max_redirects.
        3. Returns final status and headers (NO content download).
        """
        async with self.session.head(
                url,
                allow_redirects=True,
                max_redirects=self.max_redirects,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as response:
            return {
                "status": response.status,
                "headers": dict(response.headers),
                "final_url": str(response.url),
                "redirects": len(response.history),
            }

    async def check_reachable(self, url: str) -> bool:
        """True when the final response is a 2xx or 3xx."""
        result = await self.perform_request(url, method="HEAD")
        status = result.get("status", -99)
        if status < 0:
            logger.debug("Probe error for %s: %s", url, result.get("error"))
        return 200 <= status < 400

    async def fetch_content_length(self, url: str) -> Optional[int]:
        """
        Reads the Content-Length header of a HEAD response.

        Raises:
            ProbeError: On network failure or a non-ok response.
        """
        result = await self.perform_request(url, method="HEAD")
        status = result.get("status", -99)
        if status < 0:
            raise ProbeError(url, result.get("error") or "no response")
        if not 200 <= status < 400:
            raise ProbeError(url, f"HTTP {status}")

        headers = {k.lower(): v for k, v in result.get("headers", {}).items()}
        content_length = headers.get("content-length")
        if content_length is None:
            return None
        try:
            return int(content_length)
        except ValueError:
            raise ProbeError(url, f"invalid Content-Length '{content_length}'")

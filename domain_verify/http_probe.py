"""Raced HTTP/HTTPS HEAD probe."""

import asyncio
import logging

import httpx

HTTP_PROBE_TIMEOUT = 0.7
SCHEMES = ("https", "http")

logger = logging.getLogger(__name__)


async def _head_responds(client: httpx.AsyncClient, url: str, timeout: float) -> bool:
    """HEAD a URL without following redirects. Any status below 500 counts."""
    try:
        response = await asyncio.wait_for(
            client.head(url, timeout=timeout, follow_redirects=False),
            timeout,
        )
    except (httpx.HTTPError, TimeoutError) as exc:
        logger.debug("HEAD %s failed: %r", url, exc)
        return False
    return response.status_code < 500


async def probe_http(
    domain: str,
    client: httpx.AsyncClient,
    timeout: float = HTTP_PROBE_TIMEOUT,
) -> bool:
    """Probe https:// and http:// concurrently and return on the first success.

    The losing request is cancelled once either scheme responds.
    """
    tasks = [
        asyncio.create_task(_head_responds(client, f"{scheme}://{domain}", timeout))
        for scheme in SCHEMES
    ]
    try:
        for next_done in asyncio.as_completed(tasks):
            if await next_done:
                return True
        return False
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

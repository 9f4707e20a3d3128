"""Progressive output protocol: one event per layer, framed as Server-Sent Events."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator

from domain_verify.types import VerificationEvent
from domain_verify.validation import validate_domain
from domain_verify.verifier import ProgressiveVerifier

logger = logging.getLogger(__name__)


async def stream_events(
    domain: str,
    verifier: ProgressiveVerifier,
    *,
    layer_delay: float | None = None,
) -> AsyncIterator[VerificationEvent]:
    """Yield start, one layer event per verification layer, then done.

    Any failure, including an invalid domain, ends the stream with a single
    error event instead of raising.

    Args:
        domain: Domain as received from the caller (validated here).
        verifier: Engine to run the layers with.
        layer_delay: Pause between layer events in seconds (defaults to
            verifier.config.layer_delay).
    """
    if layer_delay is None:
        layer_delay = verifier.config.layer_delay

    try:
        domain = validate_domain(domain)
        yield {"type": "start", "domain": domain}

        async for result in verifier.verify_progressive(domain):
            yield {"type": "layer", **result.to_dict()}
            if result.layer < 3 and layer_delay > 0:
                await asyncio.sleep(layer_delay)

        yield {"type": "done"}
    except Exception as exc:
        logger.exception("Verification stream failed for %r", domain)
        yield {"type": "error", "error": str(exc) or "Unknown error"}


def format_sse(event: VerificationEvent) -> str:
    """Frame an event as an SSE `data:` message."""
    return f"data: {json.dumps(event)}\n\n"

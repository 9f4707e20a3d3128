"""Tests for the progressive output event stream."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from domain_verify.events import format_sse, stream_events

from .conftest import make_resolver


async def collect(stream):
    return [event async for event in stream]


@pytest.mark.asyncio
@patch("domain_verify.verifier.probe_http", new_callable=AsyncMock, return_value=False)
async def test_stream_start_layers_done(mock_probe, make_verifier):
    verifier = make_verifier(make_resolver({"A": True}))
    events = await collect(stream_events("brandly.com", verifier, layer_delay=0))

    assert [e["type"] for e in events] == ["start", "layer", "layer", "layer", "done"]
    assert events[0] == {"type": "start", "domain": "brandly.com"}
    assert [e["layer"] for e in events[1:4]] == [1, 2, 3]
    assert events[1]["available"] is False
    assert events[1]["pricing"]["currency"] == "USD"


@pytest.mark.asyncio
async def test_stream_invalid_domain_is_error_event(make_verifier):
    verifier = make_verifier()
    events = await collect(stream_events("not a domain", verifier, layer_delay=0))

    assert events == [{"type": "error", "error": "Invalid domain format"}]
    verifier.resolver.has_records.assert_not_called()


@pytest.mark.asyncio
async def test_stream_engine_failure_is_error_event(make_verifier):
    verifier = make_verifier(make_resolver({"A": False}))

    with patch.object(verifier, "verify_layer2", AsyncMock(side_effect=RuntimeError("engine broke"))):
        events = await collect(stream_events("brandly.com", verifier, layer_delay=0))

    assert [e["type"] for e in events] == ["start", "layer", "error"]
    assert events[-1]["error"] == "engine broke"


@pytest.mark.asyncio
@patch("domain_verify.verifier.probe_http", new_callable=AsyncMock, return_value=False)
async def test_stream_pauses_between_layers(mock_probe, make_verifier):
    verifier = make_verifier(make_resolver())

    with patch("domain_verify.events.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        await collect(stream_events("brandly.com", verifier, layer_delay=0.1))

    assert mock_sleep.await_count == 2
    mock_sleep.assert_awaited_with(0.1)


@pytest.mark.asyncio
@patch("domain_verify.verifier.probe_http", new_callable=AsyncMock, return_value=True)
async def test_stream_uses_config_delay_by_default(mock_probe, make_verifier):
    verifier = make_verifier(make_resolver())
    assert verifier.config.layer_delay == 0
    events = await collect(stream_events("google.com", verifier))
    assert events[-1] == {"type": "done"}


def test_format_sse():
    frame = format_sse({"type": "done"})
    assert frame == 'data: {"type": "done"}\n\n'
    assert json.loads(frame.removeprefix("data: ")) == {"type": "done"}

"""Tests for WHOIS registry lookups and payload parsing."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from domain_verify.whois_checker import (
    WhoisFinding,
    WhoisLookupError,
    parse_whois_availability,
    parse_whois_response,
    query_whois,
)


@pytest.fixture
def client():
    c = MagicMock()
    c.get = AsyncMock()
    return c


def response(status_code=200, payload=None):
    r = MagicMock()
    r.status_code = status_code
    r.json.return_value = payload
    return r


# --- Availability parsing ---

def test_no_payload_is_available():
    assert parse_whois_availability(None) is True
    assert parse_whois_availability({}) is True


def test_empty_record_is_available():
    assert parse_whois_availability({"WhoisRecord": {"registryData": {}}}) is True


def test_registrar_name_means_taken():
    assert parse_whois_availability({"WhoisRecord": {"registrar": {"name": "Gandi SAS"}}}) is False


def test_registrar_without_name_is_not_an_indicator():
    assert parse_whois_availability({"WhoisRecord": {"registrar": {}}}) is True


def test_created_date_means_taken():
    data = {"WhoisRecord": {"registryData": {"createdDate": "2015-01-01T00:00:00Z"}}}
    assert parse_whois_availability(data) is False


def test_nameservers_mean_taken():
    data = {"WhoisRecord": {"registryData": {"nameServers": {"hostNames": ["ns1.example.net"]}}}}
    assert parse_whois_availability(data) is False


def test_empty_nameserver_list_is_not_an_indicator():
    data = {"WhoisRecord": {"registryData": {"nameServers": {"hostNames": []}}}}
    assert parse_whois_availability(data) is True


@pytest.mark.parametrize("contact", ["registrant", "admin", "tech"])
def test_contact_blocks_mean_taken(contact):
    data = {"WhoisRecord": {contact: {"organization": "Example Org"}}}
    assert parse_whois_availability(data) is False


# --- Finding construction ---

def test_parse_response_taken_populates_details():
    data = {
        "WhoisRecord": {
            "registrar": {"name": "Namecheap, Inc."},
            "registryData": {"createdDate": "2019-05-01", "expiresDate": "2026-05-01"},
        }
    }
    assert parse_whois_response(data) == WhoisFinding(
        available=False,
        registrar="Namecheap, Inc.",
        registration_date="2019-05-01",
        expiration_date="2026-05-01",
    )


def test_parse_response_taken_without_registrar_name():
    data = {"WhoisRecord": {"tech": {"name": "Hostmaster"}}}
    finding = parse_whois_response(data)
    assert finding.available is False
    assert finding.registrar == "Unknown"
    assert finding.registration_date is None


def test_parse_response_available_has_no_details():
    assert parse_whois_response({}) == WhoisFinding(available=True)


# --- query_whois ---

@pytest.mark.asyncio
async def test_query_whois_success(client):
    client.get.return_value = response(payload={"WhoisRecord": {"registrar": {"name": "Gandi SAS"}}})

    finding = await query_whois("brandly.com", "key-123", client, url="https://whois.example/api")

    assert finding.available is False
    assert finding.registrar == "Gandi SAS"
    call = client.get.call_args
    assert call.args[0] == "https://whois.example/api"
    assert call.kwargs["params"] == {"apiKey": "key-123", "domainName": "brandly.com", "outputFormat": "JSON"}
    assert "User-Agent" in call.kwargs["headers"]


@pytest.mark.asyncio
async def test_query_whois_non_2xx(client):
    client.get.return_value = response(status_code=403)
    with pytest.raises(WhoisLookupError, match="403"):
        await query_whois("brandly.com", "key", client)


@pytest.mark.asyncio
async def test_query_whois_transport_error(client):
    client.get.side_effect = httpx.ReadTimeout("slow")
    with pytest.raises(WhoisLookupError):
        await query_whois("brandly.com", "key", client)


@pytest.mark.asyncio
async def test_query_whois_invalid_json(client):
    r = response()
    r.json.side_effect = ValueError("bad json")
    client.get.return_value = r
    with pytest.raises(WhoisLookupError, match="invalid JSON"):
        await query_whois("brandly.com", "key", client)


@pytest.mark.asyncio
async def test_query_whois_non_object_payload(client):
    client.get.return_value = response(payload=["not", "an", "object"])
    with pytest.raises(WhoisLookupError):
        await query_whois("brandly.com", "key", client)


@pytest.mark.asyncio
async def test_query_whois_hard_timeout(client):
    async def slow(*args, **kwargs):
        await asyncio.sleep(1)

    client.get.side_effect = slow
    with pytest.raises(WhoisLookupError, match="timed out"):
        await query_whois("brandly.com", "key", client, timeout=0.01)
    assert client.get.await_count == 1


# --- Unexpected payload shapes ---

@pytest.mark.parametrize(
    "record",
    [
        {"registrar": "MarkMonitor Inc."},
        {"registryData": {"nameServers": ["ns1.x.com"]}},
        {"registryData": "2015-01-01", "registrar": ["Gandi SAS"]},
    ],
)
def test_non_object_sections_count_as_absent(record):
    assert parse_whois_availability({"WhoisRecord": record}) is True
    assert parse_whois_response({"WhoisRecord": record}) == WhoisFinding(available=True)


def test_non_object_sections_do_not_hide_other_indicators():
    data = {"WhoisRecord": {"registrar": "MarkMonitor Inc.", "registryData": {"createdDate": "1997-09-15"}}}
    finding = parse_whois_response(data)
    assert finding.available is False
    assert finding.registrar == "Unknown"
    assert finding.registration_date == "1997-09-15"


def test_non_object_record_is_rejected():
    with pytest.raises(ValueError, match="not an object"):
        parse_whois_availability({"WhoisRecord": "unexpected"})


@pytest.mark.asyncio
@pytest.mark.parametrize("record", ["unexpected", ["a", "b"], 42])
async def test_query_whois_non_object_record(client, record):
    client.get.return_value = response(payload={"WhoisRecord": record})
    with pytest.raises(WhoisLookupError, match="unexpected payload"):
        await query_whois("brandly.com", "key", client)

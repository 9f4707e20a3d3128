"""WHOIS registry lookups for authoritative verification."""

import asyncio
from dataclasses import dataclass

import httpx

from domain_verify.config import DEFAULT_WHOIS_URL, USER_AGENT

WHOIS_TIMEOUT = 15.0
UNKNOWN_REGISTRAR = "Unknown"


class WhoisLookupError(Exception):
    """The WHOIS service could not be reached or returned an unusable answer."""


@dataclass(frozen=True)
class WhoisFinding:
    available: bool
    registrar: str | None = None
    registration_date: str | None = None
    expiration_date: str | None = None


def _section(mapping: dict, key: str) -> dict:
    """Nested object at key; anything that is not a JSON object counts as absent."""
    value = mapping.get(key)
    return value if isinstance(value, dict) else {}


def _whois_record(data: dict | None) -> dict | None:
    if not isinstance(data, dict) or not data.get("WhoisRecord"):
        return None
    record = data["WhoisRecord"]
    if not isinstance(record, dict):
        raise ValueError(f"WhoisRecord is a {type(record).__name__}, not an object")
    return record


def _has_nameservers(registry_data: dict) -> bool:
    return bool(_section(registry_data, "nameServers").get("hostNames"))


def parse_whois_availability(data: dict | None) -> bool:
    """Decide availability from a WhoisXML-style payload.

    A domain is taken if any registration indicator is present: a named
    registrar, a creation date, nameserver hostnames, or a registrant/admin/tech
    contact block. No `WhoisRecord` at all means available.

    Raises:
        ValueError: If `WhoisRecord` is present but is not an object.
    """
    record = _whois_record(data)
    if record is None:
        return True

    registry_data = _section(record, "registryData")

    if _section(record, "registrar").get("name"):
        return False
    if registry_data.get("createdDate"):
        return False
    if _has_nameservers(registry_data):
        return False
    if record.get("registrant") or record.get("admin") or record.get("tech"):
        return False

    return True


def parse_whois_response(data: dict | None) -> WhoisFinding:
    """Build a WhoisFinding, carrying registration details only for taken domains."""
    if parse_whois_availability(data):
        return WhoisFinding(available=True)

    record = _whois_record(data)
    registry_data = _section(record, "registryData")
    return WhoisFinding(
        available=False,
        registrar=_section(record, "registrar").get("name") or UNKNOWN_REGISTRAR,
        registration_date=registry_data.get("createdDate"),
        expiration_date=registry_data.get("expiresDate"),
    )


async def query_whois(
    domain: str,
    api_key: str,
    client: httpx.AsyncClient,
    *,
    url: str = DEFAULT_WHOIS_URL,
    timeout: float = WHOIS_TIMEOUT,
    user_agent: str = USER_AGENT,
) -> WhoisFinding:
    """Issue a single WHOIS lookup. There is no retry.

    Raises:
        WhoisLookupError: On timeout, transport error, non-2xx status or a
            payload that is not a WHOIS JSON object.
    """
    try:
        response = await asyncio.wait_for(
            client.get(
                url,
                params={"apiKey": api_key, "domainName": domain, "outputFormat": "JSON"},
                headers={"User-Agent": user_agent, "Accept": "application/json"},
                timeout=timeout,
            ),
            timeout,
        )
    except TimeoutError as exc:
        raise WhoisLookupError(f"WHOIS lookup for {domain} timed out after {timeout}s") from exc
    except httpx.HTTPError as exc:
        raise WhoisLookupError(f"WHOIS lookup for {domain} failed: {exc!r}") from exc

    if not 200 <= response.status_code < 300:
        raise WhoisLookupError(f"WHOIS API returned {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        raise WhoisLookupError("WHOIS API returned invalid JSON") from exc

    if not isinstance(data, dict):
        raise WhoisLookupError("WHOIS API returned an unexpected payload")

    try:
        return parse_whois_response(data)
    except ValueError as exc:
        raise WhoisLookupError("WHOIS API returned an unexpected payload") from exc

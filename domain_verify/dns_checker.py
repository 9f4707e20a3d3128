"""Async DNS record lookups over DNS-over-HTTPS or the system resolver."""

from typing import Protocol

import dns.asyncresolver
import dns.exception
import dns.resolver
import httpx

from domain_verify.config import DEFAULT_DOH_URL, USER_AGENT, VerifierConfig
from domain_verify.types import DnsRecordType

DNS_TIMEOUT = 5.0


class DnsLookupError(Exception):
    """A lookup that could not say whether records exist (timeout, server error, bad payload)."""

    def __init__(self, domain: str, rdtype: str, reason: str):
        super().__init__(f"{rdtype} lookup for {domain} failed: {reason}")
        self.domain = domain
        self.rdtype = rdtype
        self.reason = reason


class DnsResolver(Protocol):
    async def has_records(self, domain: str, rdtype: DnsRecordType, timeout: float = DNS_TIMEOUT) -> bool:
        """Return True if at least one record of rdtype exists, False if none.

        Raises DnsLookupError when the answer is inconclusive.
        """
        ...


class DohResolver:
    """DNS-over-HTTPS JSON resolver (Google/Cloudflare style `?name=&type=` API).

    A lookup counts as present iff the response's `Answer` array is non-empty.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_DOH_URL,
        client: httpx.AsyncClient | None = None,
        user_agent: str = USER_AGENT,
    ):
        self.endpoint = endpoint
        self._client = client
        self._headers = {"Accept": "application/dns-json", "User-Agent": user_agent}

    async def _get(self, client: httpx.AsyncClient, domain: str, rdtype: str, timeout: float) -> httpx.Response:
        return await client.get(
            self.endpoint,
            params={"name": domain, "type": rdtype},
            headers=self._headers,
            timeout=timeout,
        )

    async def has_records(self, domain: str, rdtype: DnsRecordType, timeout: float = DNS_TIMEOUT) -> bool:
        try:
            if self._client is not None:
                response = await self._get(self._client, domain, rdtype, timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get(client, domain, rdtype, timeout)
        except httpx.HTTPError as exc:
            raise DnsLookupError(domain, rdtype, str(exc) or type(exc).__name__) from exc

        if response.status_code != 200:
            raise DnsLookupError(domain, rdtype, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise DnsLookupError(domain, rdtype, "invalid JSON response") from exc

        return bool(data.get("Answer"))


class SystemResolver:
    """dnspython async resolver using the host's nameservers.

    NXDOMAIN, NoAnswer and NoNameservers all mean "no records"; timeouts and
    other resolver errors are inconclusive.
    """

    def __init__(self, resolver: dns.asyncresolver.Resolver | None = None):
        self._resolver = resolver or dns.asyncresolver.Resolver()

    async def has_records(self, domain: str, rdtype: DnsRecordType, timeout: float = DNS_TIMEOUT) -> bool:
        try:
            await self._resolver.resolve(domain, rdtype, lifetime=timeout)
            return True
        except (dns.resolver.NXDOMAIN, dns.resolver.NoNameservers, dns.resolver.NoAnswer):
            return False
        except (dns.exception.Timeout, dns.resolver.LifetimeTimeout) as exc:
            raise DnsLookupError(domain, rdtype, "timed out") from exc
        except dns.exception.DNSException as exc:
            raise DnsLookupError(domain, rdtype, str(exc) or type(exc).__name__) from exc


def create_resolver(config: VerifierConfig, client: httpx.AsyncClient | None = None) -> DnsResolver:
    """Build the resolver selected by config.dns_backend."""
    if config.dns_backend == "system":
        return SystemResolver()
    return DohResolver(config.doh_url, client=client, user_agent=config.user_agent)

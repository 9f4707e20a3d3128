"""Progressive three-layer domain verification.

Each layer answers "is this domain registered?" with more authority than the
one before it:

- Layer 1 (instant, ~100ms): known-domain and name-pattern heuristics plus a
  single DNS A lookup.
- Layer 2 (fast, 1-3s): concurrent NS/MX lookups, and for domains that still
  look taken or uncertain, a concurrent SOA lookup and raced HTTP/HTTPS probe.
- Layer 3 (authoritative, up to 15s): a WHOIS registry lookup.

Every layer builds a new VerificationResult from the previous layer's result.
Probe failures never escape a layer; they lower confidence and are recorded
in the evidence trail instead.
"""

import asyncio
import logging
import re
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import replace

import httpx

from domain_verify.alternates import suggest_alternates
from domain_verify.classifier import classify
from domain_verify.config import VerifierConfig
from domain_verify.dns_checker import DnsLookupError, DnsResolver, create_resolver
from domain_verify.http_probe import probe_http
from domain_verify.models import Availability, FastCheckResult, VerificationResult, utc_now
from domain_verify.pricing import get_domain_pricing
from domain_verify.types import DnsRecordType
from domain_verify.whois_checker import WhoisLookupError, query_whois

logger = logging.getLogger(__name__)

GENERATED_NAME_PATTERN = re.compile(r"test|demo|example|sample|fake", re.IGNORECASE)
SKIP_DNS_PATTERN = re.compile(r"test\d{5,}")

MAX_ROOT_LENGTH = 25
SKIP_DNS_ROOT_LENGTH = 20
MAX_DIGITS = 5
MAX_HYPHENS = 3

NEUTRAL_CONFIDENCE = 50
KNOWN_DOMAIN_CONFIDENCE = 99
PATTERN_CONFIDENCE = 75
SKIP_DNS_CONFIDENCE = 80
A_RECORD_CONFIDENCE = 85
NO_A_RECORD_CONFIDENCE = 65
DNS_INCONCLUSIVE_CONFIDENCE = 55

HTTP_SKIP_CONFIDENCE = 65
RECORD_BOOST = 15
HTTP_BOOST = 15
AGE_BOOST = 10
LAYER2_CONFIDENCE_CAP = 95
LAYER2_AVAILABLE_FLOOR = 70
MIN_AGE_DAYS = 90
# Flat estimate whenever an SOA record exists
SOA_ESTIMATED_AGE_DAYS = 365

WHOIS_CONFIDENCE = 100

EVIDENCE_KNOWN_DOMAIN = "Matches known registered domain"
EVIDENCE_PATTERN = "Domain pattern suggests likely availability"
EVIDENCE_SKIPPED_DNS = "Very unlikely domain pattern - skipped DNS check"
EVIDENCE_A_RECORD = "DNS A-record found"
EVIDENCE_NO_A_RECORD = "No DNS A-record found"
EVIDENCE_DNS_INCONCLUSIVE = "DNS check inconclusive - using pattern analysis"
EVIDENCE_HTTP = "Domain responds to HTTP requests"
EVIDENCE_NO_INFRASTRUCTURE = "No significant DNS infrastructure found"
EVIDENCE_WHOIS_VERIFIED = "Verified by WHOIS registry"
EVIDENCE_WHOIS_UNAVAILABLE = "WHOIS verification unavailable"
EVIDENCE_WHOIS_FAILED = "WHOIS verification failed - using comprehensive DNS result"


def root_label(domain: str) -> str:
    """Return the first label of a domain ("brand" for "brand.co.uk")."""
    return domain.split(".")[0]


def is_obviously_available(domain: str) -> bool:
    """Heuristic for machine-generated or throwaway names nobody registers."""
    root = root_label(domain)

    if len(root) > MAX_ROOT_LENGTH:
        return True

    digits = sum(1 for ch in root if ch.isdigit())
    if digits > MAX_DIGITS or root.count("-") > MAX_HYPHENS:
        return True

    return bool(GENERATED_NAME_PATTERN.search(root))


def should_skip_dns(domain: str) -> bool:
    """Names so unlikely that a DNS lookup isn't worth the latency.

    Only the root label is considered, and the test-number pattern is
    case-sensitive.
    """
    root = root_label(domain)
    return len(root) > SKIP_DNS_ROOT_LENGTH or bool(SKIP_DNS_PATTERN.search(root))


def strengthen(confidence: int, boost: int) -> int:
    """Raise confidence by boost, capped at the layer 2 ceiling.

    The cap never pulls a confidence that is already above it back down.
    """
    return max(confidence, min(LAYER2_CONFIDENCE_CAP, confidence + boost))


class ProgressiveVerifier:
    """Runs the three verification layers for one domain at a time.

    The verifier holds only immutable configuration, so a single instance can
    serve any number of concurrent sessions.
    """

    def __init__(
        self,
        config: VerifierConfig | None = None,
        *,
        resolver: DnsResolver | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            config: Engine settings (defaults to VerifierConfig.from_env()).
            resolver: DNS resolver override; built from config.dns_backend if None.
            client: Shared httpx client for HTTP probes and WHOIS. When None, a
                short-lived client is opened per operation.
        """
        self.config = config or VerifierConfig.from_env()
        self._client = client
        self.resolver = resolver or create_resolver(self.config, client=client)

    @asynccontextmanager
    async def _http_client(self):
        if self._client is not None:
            yield self._client
        else:
            async with httpx.AsyncClient() as client:
                yield client

    def _build_result(
        self,
        domain: str,
        layer: int,
        available: Availability,
        confidence: int,
        evidence: Iterable[str],
        **registration: str | None,
    ) -> VerificationResult:
        return VerificationResult(
            domain=domain,
            layer=layer,
            available=available,
            confidence=confidence,
            status=classify(available, confidence, layer),
            evidence=tuple(evidence),
            pricing=get_domain_pricing(domain, self.config.pricing_table),
            completed_at=utc_now(),
            **registration,
        )

    async def _lookup(self, domain: str, rdtype: DnsRecordType, timeout: float) -> bool:
        """Resolver call bounded by a hard timeout. Raises DnsLookupError."""
        try:
            return await asyncio.wait_for(self.resolver.has_records(domain, rdtype, timeout), timeout)
        except DnsLookupError:
            raise
        except TimeoutError as exc:
            raise DnsLookupError(domain, rdtype, f"timed out after {timeout}s") from exc
        except Exception as exc:
            raise DnsLookupError(domain, rdtype, repr(exc)) from exc

    async def _record_present(self, domain: str, rdtype: DnsRecordType) -> bool:
        """Layer 2 lookup where an inconclusive answer counts as absent."""
        try:
            return await self._lookup(domain, rdtype, self.config.layer2_dns_timeout)
        except DnsLookupError as exc:
            logger.debug("Treating failed lookup as absent: %s", exc)
            return False

    async def _estimate_age_days(self, domain: str) -> int | None:
        if await self._record_present(domain, "SOA"):
            return SOA_ESTIMATED_AGE_DAYS
        return None

    async def _http_responds(self, domain: str) -> bool:
        async with self._http_client() as client:
            return await probe_http(domain, client, self.config.http_probe_timeout)

    async def verify_layer1(self, domain: str) -> VerificationResult:
        """Layer 1: instant verification from patterns and one A lookup."""
        if domain.lower() in self.config.known_taken_domains:
            return self._build_result(
                domain, 1, Availability.TAKEN, KNOWN_DOMAIN_CONFIDENCE, [EVIDENCE_KNOWN_DOMAIN]
            )

        if should_skip_dns(domain):
            return self._build_result(
                domain, 1, Availability.AVAILABLE, SKIP_DNS_CONFIDENCE, [EVIDENCE_SKIPPED_DNS]
            )

        evidence: list[str] = []
        available = Availability.UNKNOWN
        confidence = NEUTRAL_CONFIDENCE

        if is_obviously_available(domain):
            available = Availability.AVAILABLE
            confidence = PATTERN_CONFIDENCE
            evidence.append(EVIDENCE_PATTERN)

        try:
            has_a_record = await self._lookup(domain, "A", self.config.layer1_dns_timeout)
        except DnsLookupError as exc:
            logger.debug("Layer 1 DNS inconclusive: %s", exc)
            if available is Availability.UNKNOWN:
                available = Availability.AVAILABLE
                confidence = DNS_INCONCLUSIVE_CONFIDENCE
            evidence.append(EVIDENCE_DNS_INCONCLUSIVE)
        else:
            if has_a_record:
                available = Availability.TAKEN
                confidence = max(confidence, A_RECORD_CONFIDENCE)
                evidence.append(EVIDENCE_A_RECORD)
            else:
                if available is Availability.UNKNOWN:
                    available = Availability.AVAILABLE
                    confidence = NO_A_RECORD_CONFIDENCE
                evidence.append(EVIDENCE_NO_A_RECORD)

        return self._build_result(domain, 1, available, confidence, evidence)

    async def verify_layer2(self, domain: str, layer1_result: VerificationResult) -> VerificationResult:
        """Layer 2: NS/MX lookups plus conditional SOA lookup and HTTP probe.

        Starts from layer 1's availability and confidence and only ever moves
        towards "taken"; confidence never drops below layer 1's.
        """
        evidence = list(layer1_result.evidence)
        available = layer1_result.available
        confidence = layer1_result.confidence

        # Confident "available" from layer 1 skips the SOA lookup and HTTP probe
        probe_further = available is Availability.TAKEN or confidence < HTTP_SKIP_CONFIDENCE

        has_ns, has_mx = await asyncio.gather(
            self._record_present(domain, "NS"),
            self._record_present(domain, "MX"),
        )

        estimated_age: int | None = None
        http_responds = False

        if probe_further:
            estimated_age, http_responds = await asyncio.gather(
                self._estimate_age_days(domain),
                self._http_responds(domain),
            )

        records_found = sum([has_ns, has_mx])
        if records_found > 0:
            available = Availability.TAKEN
            confidence = strengthen(confidence, records_found * RECORD_BOOST)
            evidence.append(f"Found {records_found} critical DNS records (NS/MX)")

        if http_responds:
            available = Availability.TAKEN
            confidence = strengthen(confidence, HTTP_BOOST)
            evidence.append(EVIDENCE_HTTP)

        if estimated_age is not None and estimated_age > MIN_AGE_DAYS:
            available = Availability.TAKEN
            confidence = strengthen(confidence, AGE_BOOST)
            evidence.append(f"Domain appears to be {estimated_age}+ days old")

        if available is Availability.AVAILABLE and confidence < LAYER2_AVAILABLE_FLOOR:
            confidence = LAYER2_AVAILABLE_FLOOR
            evidence.append(EVIDENCE_NO_INFRASTRUCTURE)

        return self._build_result(domain, 2, available, confidence, evidence)

    @staticmethod
    def _carry_forward(layer2_result: VerificationResult, note: str) -> VerificationResult:
        """Promote a layer 2 result to layer 3 with one extra evidence entry."""
        return replace(
            layer2_result,
            layer=3,
            evidence=(*layer2_result.evidence, note),
            completed_at=utc_now(),
        )

    async def verify_layer3(self, domain: str, layer2_result: VerificationResult) -> VerificationResult:
        """Layer 3: authoritative WHOIS lookup, single attempt.

        Without an API key, or when the lookup fails, layer 2's result is
        returned as layer 3 with an explanatory evidence entry.
        """
        if not self.config.whois_enabled:
            logger.warning("No WHOIS API key - returning layer 2 result as final for %s", domain)
            return self._carry_forward(layer2_result, EVIDENCE_WHOIS_UNAVAILABLE)

        try:
            async with self._http_client() as client:
                finding = await query_whois(
                    domain,
                    self.config.whois_api_key,
                    client,
                    url=self.config.whois_url,
                    timeout=self.config.whois_timeout,
                    user_agent=self.config.user_agent,
                )
        except WhoisLookupError as exc:
            logger.warning("Layer 3 WHOIS check failed for %s: %s", domain, exc)
            return self._carry_forward(layer2_result, EVIDENCE_WHOIS_FAILED)

        available = Availability.AVAILABLE if finding.available else Availability.TAKEN
        return self._build_result(
            domain,
            3,
            available,
            WHOIS_CONFIDENCE,
            [*layer2_result.evidence, EVIDENCE_WHOIS_VERIFIED],
            registrar=finding.registrar,
            registration_date=finding.registration_date,
            expiration_date=finding.expiration_date,
        )

    async def verify_progressive(self, domain: str) -> AsyncIterator[VerificationResult]:
        """Yield the layer 1, 2 and 3 results in order as each completes.

        Nothing runs ahead of the consumer: stopping iteration after any
        layer means later layers are never started.
        """
        layer1 = await self.verify_layer1(domain)
        yield layer1

        layer2 = await self.verify_layer2(domain, layer1)
        yield layer2

        yield await self.verify_layer3(domain, layer2)

    async def verify_fast(self, domain: str) -> FastCheckResult:
        """Run layers 1 and 2 only, with unchecked alternate-TLD suggestions."""
        layer1 = await self.verify_layer1(domain)
        layer2 = await self.verify_layer2(domain, layer1)
        return FastCheckResult(result=layer2, alternates=tuple(suggest_alternates(domain)))

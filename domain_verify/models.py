"""Verification result data structures."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from domain_verify.types import AlternatePayload, PricingPayload, ResultPayload


class Availability(Enum):
    AVAILABLE = "available"
    TAKEN = "taken"
    UNKNOWN = "unknown"

    def as_bool(self) -> bool | None:
        """Map to the wire tri-state: true, false or null."""
        if self is Availability.AVAILABLE:
            return True
        if self is Availability.TAKEN:
            return False
        return None


class VerificationStatus(Enum):
    CHECKING = "checking"
    LIKELY_AVAILABLE = "likely_available"
    LIKELY_TAKEN = "likely_taken"
    AVAILABLE = "available"
    TAKEN = "taken"


@dataclass(frozen=True)
class Pricing:
    registration: float
    renewal: float
    currency: str = "USD"
    registrar: str = "Namecheap"

    def to_dict(self) -> PricingPayload:
        return {
            "registration": self.registration,
            "renewal": self.renewal,
            "currency": self.currency,
            "registrar": self.registrar,
        }


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of one verification layer for one domain.

    A fresh instance is built per layer. The next layer only reads it.
    """

    domain: str
    layer: int
    available: Availability
    confidence: int
    status: VerificationStatus
    evidence: tuple[str, ...]
    pricing: Pricing
    completed_at: datetime
    registrar: str | None = None
    registration_date: str | None = None
    expiration_date: str | None = None

    def to_dict(self) -> ResultPayload:
        """Serialize to the progressive output wire shape."""
        return {
            "domain": self.domain,
            "layer": self.layer,
            "available": self.available.as_bool(),
            "confidence": self.confidence,
            "status": self.status.value,
            "evidence": list(self.evidence),
            "completedAt": self.completed_at.isoformat(),
            "registrar": self.registrar,
            "registrationDate": self.registration_date,
            "expirationDate": self.expiration_date,
            "pricing": self.pricing.to_dict(),
        }


@dataclass(frozen=True)
class Alternate:
    """An unchecked alternate domain suggestion."""

    domain: str
    score: int

    def to_dict(self) -> AlternatePayload:
        return {"domain": self.domain, "score": self.score, "available": None}


@dataclass(frozen=True)
class FastCheckResult:
    result: VerificationResult
    alternates: tuple[Alternate, ...]

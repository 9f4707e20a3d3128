"""Shared typed aliases for verification payloads and stream events."""

from typing import Literal, NotRequired, TypedDict

DnsRecordType = Literal["A", "NS", "MX", "SOA"]
DnsBackend = Literal["doh", "system"]
EventType = Literal["start", "layer", "done", "error"]


class PricingPayload(TypedDict):
    registration: float
    renewal: float
    currency: str
    registrar: str


class ResultPayload(TypedDict):
    domain: str
    layer: int
    available: bool | None
    confidence: int
    status: str
    evidence: list[str]
    completedAt: str
    registrar: str | None
    registrationDate: str | None
    expirationDate: str | None
    pricing: PricingPayload


class VerificationEvent(TypedDict, total=False):
    type: EventType
    domain: str
    error: str
    layer: int
    available: bool | None
    confidence: int
    status: str
    evidence: list[str]
    completedAt: str
    registrar: str | None
    registrationDate: str | None
    expirationDate: str | None
    pricing: PricingPayload


class AlternatePayload(TypedDict):
    domain: str
    score: int
    available: NotRequired[bool | None]

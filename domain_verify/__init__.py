"""domain-verify: progressive, multi-layer domain registration checks."""

__version__ = "0.1.0"

from .classifier import classify
from .config import VerifierConfig
from .events import format_sse, stream_events
from .models import (
    Alternate,
    Availability,
    FastCheckResult,
    Pricing,
    VerificationResult,
    VerificationStatus,
)
from .validation import InvalidDomainError, validate_domain
from .verifier import ProgressiveVerifier

__all__ = [
    # Engine
    "ProgressiveVerifier",
    "VerifierConfig",
    "classify",
    # Results
    "Alternate",
    "Availability",
    "FastCheckResult",
    "Pricing",
    "VerificationResult",
    "VerificationStatus",
    # Output protocol
    "format_sse",
    "stream_events",
    # Input
    "InvalidDomainError",
    "validate_domain",
]

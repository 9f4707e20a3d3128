"""Map raw layer findings to a user-facing verification status."""

from domain_verify.models import Availability, VerificationStatus

AUTHORITATIVE_LAYER = 3
CONFIDENT_THRESHOLD = 85


def classify(available: Availability, confidence: int, layer: int) -> VerificationStatus:
    """Derive the status for a layer's (availability, confidence) finding.

    Layer 3 is authoritative and always collapses to available/taken,
    regardless of confidence. Earlier layers report "checking" while
    availability is undetermined and only drop the "likely_" prefix at
    CONFIDENT_THRESHOLD or above.
    """
    if layer == AUTHORITATIVE_LAYER:
        if available is Availability.AVAILABLE:
            return VerificationStatus.AVAILABLE
        return VerificationStatus.TAKEN

    if available is Availability.UNKNOWN:
        return VerificationStatus.CHECKING

    if confidence >= CONFIDENT_THRESHOLD:
        if available is Availability.AVAILABLE:
            return VerificationStatus.AVAILABLE
        return VerificationStatus.TAKEN

    if available is Availability.AVAILABLE:
        return VerificationStatus.LIKELY_AVAILABLE
    return VerificationStatus.LIKELY_TAKEN

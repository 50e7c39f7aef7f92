from datetime import datetime, timezone

from .models import CandidatePrediction, CatalogEntry


CONFIDENCE_THRESHOLD = 0.01

UNAVAILABLE_TEXT = "Information temporarily unavailable"

DEFAULT_DETAILS = {
    "symptoms": "Common symptoms include redness, itching, and inflammation.",
    "causes": "Can be caused by various factors including genetics, environment, and lifestyle.",
    "treatment": (
        "Treatment options may include topical medications, lifestyle changes, "
        "and in some cases, prescription medications."
    ),
    "prevention": "Maintain good skin hygiene and avoid known triggers.",
}

UNAVAILABLE_DETAILS = {
    "symptoms": UNAVAILABLE_TEXT,
    "causes": UNAVAILABLE_TEXT,
    "treatment": "Please consult a healthcare professional",
    "prevention": UNAVAILABLE_TEXT,
}


def default_entry(candidate: CandidatePrediction) -> CatalogEntry:
    """Generic details for a disease the catalog has no record of."""
    return CatalogEntry(name=candidate.disease, severity=candidate.severity, **DEFAULT_DETAILS)


def unavailable_entry(candidate: CandidatePrediction) -> CatalogEntry:
    """Details used when the catalog lookup itself failed."""
    return CatalogEntry(name=candidate.disease, severity=candidate.severity, **UNAVAILABLE_DETAILS)


def utc_timestamp() -> str:
    # Millisecond precision, "Z" suffix
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

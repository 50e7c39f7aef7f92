from typing import List

from healthlens.application.ports import PredictorPort
from healthlens.domain.models import CandidatePrediction, Severity


COMMON_DISEASES = [
    CandidatePrediction(disease="Acne", confidence=0.85, severity=Severity.MODERATE),
    CandidatePrediction(disease="Eczema", confidence=0.12, severity=Severity.MILD),
    CandidatePrediction(disease="Psoriasis", confidence=0.03, severity=Severity.MILD),
    CandidatePrediction(disease="Rosacea", confidence=0.02, severity=Severity.MILD),
    CandidatePrediction(disease="Dermatitis", confidence=0.01, severity=Severity.MILD),
]


class MockSkinPredictor(PredictorPort):
    """Placeholder scorer: ignores the image and returns a fixed ranking."""

    def __init__(self, top_k: int = 3):
        self.top_k = top_k

    def rank(self, image: str) -> List[CandidatePrediction]:
        ranked = sorted(COMMON_DISEASES, key=lambda p: p.confidence, reverse=True)
        return ranked[: self.top_k]

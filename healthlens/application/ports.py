from typing import List, Optional, Protocol
from healthlens.domain.models import CandidatePrediction


class PredictorPort(Protocol):
    def rank(self, image: str) -> List[CandidatePrediction]:
        """
        Returns candidate diseases for an encoded image, highest confidence first.
        """
        ...


class DocumentStorePort(Protocol):
    def is_connected(self) -> bool:
        ...

    def find_one(self, collection: str, query: dict, timeout: Optional[float] = None) -> Optional[dict]:
        ...

    def find_many(self, collection: str, limit: int) -> List[dict]:
        ...

    def replace_all(self, collection: str, documents: List[dict]) -> int:
        ...

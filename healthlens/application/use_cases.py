import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional

from healthlens.application.errors import MissingImageError, NoRecordsFoundError, StoreUnavailableError
from healthlens.application.ports import DocumentStorePort, PredictorPort
from healthlens.domain.models import CandidatePrediction, CatalogEntry, EnrichedResult, ResponseEnvelope
from healthlens.domain.rules import CONFIDENCE_THRESHOLD, default_entry, unavailable_entry, utc_timestamp


logger = logging.getLogger(__name__)


SKIN_DISEASES_COLLECTION = "skin_diseases"
MENTAL_HEALTH_COLLECTION = "mental_health_data"
DEFAULT_LOOKUP_TIMEOUT = 5.0
DEFAULT_FEED_LIMIT = 100


class SkinAnalysisUseCase:
    def __init__(
        self,
        predictor: PredictorPort,
        store: DocumentStorePort,
        collection: str = SKIN_DISEASES_COLLECTION,
        lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT,
        max_workers: Optional[int] = None,
    ):
        self.predictor = predictor
        self.store = store
        self.collection = collection
        self.lookup_timeout = lookup_timeout
        self.max_workers = max_workers

    def analyze(self, image: Optional[str]) -> ResponseEnvelope:
        if not image:
            raise MissingImageError()
        if not self.store.is_connected():
            raise StoreUnavailableError()

        predictions = self.predictor.rank(image)
        return ResponseEnvelope(
            predictions=self.enrich(predictions),
            timestamp=utc_timestamp(),
            confidence_threshold=CONFIDENCE_THRESHOLD,
        )

    def enrich(self, predictions: List[CandidatePrediction]) -> List[EnrichedResult]:
        """
        Attach catalog details to every candidate.

        Lookups run concurrently and share one deadline. Output order always
        matches input order; a failed or expired lookup only affects its own
        candidate.
        """
        if not predictions:
            return []

        executor = ThreadPoolExecutor(
            max_workers=self.max_workers or len(predictions),
            thread_name_prefix="catalog-lookup",
        )
        try:
            futures = [executor.submit(self._lookup, p) for p in predictions]
            deadline = time.monotonic() + self.lookup_timeout
            return [self._resolve(p, f, deadline) for p, f in zip(predictions, futures)]
        finally:
            # A hung lookup must not hold the response
            executor.shutdown(wait=False, cancel_futures=True)

    def _lookup(self, candidate: CandidatePrediction) -> CatalogEntry:
        doc = self.store.find_one(self.collection, {"name": candidate.disease}, timeout=self.lookup_timeout)
        if not doc:
            logger.warning("No details found for disease: %s", candidate.disease)
            return default_entry(candidate)
        return CatalogEntry(**doc)

    def _resolve(self, candidate: CandidatePrediction, future: Future, deadline: float) -> EnrichedResult:
        try:
            details = future.result(timeout=max(0.0, deadline - time.monotonic()))
        except Exception as e:
            logger.error("Error fetching details for %s: %r", candidate.disease, e)
            details = unavailable_entry(candidate)
        return EnrichedResult(
            disease=candidate.disease,
            confidence=candidate.confidence,
            severity=candidate.severity,
            details=details,
        )


class MentalHealthFeedUseCase:
    def __init__(
        self,
        store: DocumentStorePort,
        collection: str = MENTAL_HEALTH_COLLECTION,
        limit: int = DEFAULT_FEED_LIMIT,
    ):
        self.store = store
        self.collection = collection
        self.limit = limit

    def fetch(self) -> List[dict]:
        if not self.store.is_connected():
            raise StoreUnavailableError()
        records = self.store.find_many(self.collection, limit=self.limit)
        if not records:
            raise NoRecordsFoundError()
        return records


class HealthCheckUseCase:
    def __init__(self, store: DocumentStorePort):
        self.store = store

    def status(self) -> dict:
        return {
            "status": "ok",
            "mongodb": "connected" if self.store.is_connected() else "disconnected",
        }

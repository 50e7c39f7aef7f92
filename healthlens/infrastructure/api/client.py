import logging
from typing import List

import requests

from healthlens.infrastructure.config import Settings


logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class HealthLensApiClient:
    def __init__(self, settings: Settings | None = None, base_url: str | None = None, timeout: float = 30):
        self.settings = settings or Settings()
        self.base_url = (base_url or self.settings.api_url).rstrip("/")
        self.timeout = timeout

    def _check(self, resp: requests.Response) -> None:
        if resp.ok:
            return
        try:
            body = resp.json()
        except ValueError:
            body = {}
        message = body.get("message") or body.get("error") or f"HTTP {resp.status_code}"
        raise ApiError(resp.status_code, message)

    def analyze_skin(self, image: str) -> dict:
        resp = requests.post(f"{self.base_url}/api/skin-analysis", json={"image": image}, timeout=self.timeout)
        self._check(resp)
        return resp.json()

    def mental_health_records(self) -> List[dict]:
        resp = requests.get(f"{self.base_url}/api/mental-health", timeout=self.timeout)
        self._check(resp)
        return resp.json()

    def health(self) -> dict:
        resp = requests.get(f"{self.base_url}/api/health", timeout=self.timeout)
        self._check(resp)
        return resp.json()

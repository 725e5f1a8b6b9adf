"""HTTP client for the transactions API.

Error statuses come back as the same exceptions the server raised
(`ValidationError`, `NotFoundError`, `StorageError`). An unreachable
server is a `StorageError` too: callers treat both as "remote write failed".
"""
import logging

import httpx

from errors import StorageError, error_for_status

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(self, base_url: str, http: httpx.Client = None):
        self.base_url = base_url.rstrip('/')
        self._http = http or httpx.Client()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            resp = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            raise StorageError(f"server unreachable: {exc}") from exc
        if resp.is_success:
            try:
                return resp.json()
            except ValueError as exc:
                # Usually API_BASE without /api: the app shell answers with HTML.
                logger.debug("%s %s returned non-JSON: %s", method, url, exc)
                raise StorageError(f"unexpected non-JSON reply from {url}") from exc
        try:
            message = resp.json().get('error') or resp.reason_phrase
        except (ValueError, AttributeError):
            message = resp.text or resp.reason_phrase
        raise error_for_status(resp.status_code, message)

    def health(self) -> dict:
        return self._request('GET', '/health')

    def list_transactions(self) -> list[dict]:
        return self._request('GET', '/transactions')

    def create_transaction(self, payload: dict) -> dict:
        return self._request('POST', '/transactions', json=payload)

    def delete_transaction(self, tx_id: str) -> dict:
        return self._request('DELETE', f'/transactions/{tx_id}')

    def import_transactions(self, records: list[dict]) -> dict:
        return self._request('POST', '/import', json={'transactions': records})

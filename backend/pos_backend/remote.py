import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from .exceptions import RemoteServiceError

logger = logging.getLogger(__name__)


class RemoteServiceClient:
    """
    Base client for the external record services (orders, purchase orders).

    Responses are expected as JSON. Any transport failure or non-2xx status is
    raised as RemoteServiceError so callers can tell it apart from local
    validation failures.
    """

    service_name = "remote service"

    def __init__(self, base_url: str, timeout: Optional[int] = None, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.POS_REMOTE_TIMEOUT
        self.session = session or requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _make_request(
        self, method: str, endpoint: str = "", data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self._get_headers(),
                json=data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{self.service_name} request failed: {method} {url} - {e}")
            raise RemoteServiceError(f"{self.service_name} is unreachable: {e}") from e

        if response.status_code >= 400:
            details = self._error_details(response)
            logger.error(
                f"{self.service_name} rejected {method} {url} with {response.status_code}: {details}"
            )
            raise RemoteServiceError(
                f"{self.service_name} responded with status {response.status_code}",
                status_code=response.status_code,
                details=details,
            )

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(
                f"{self.service_name} returned a non-JSON response",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _error_details(response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {"body": response.text[:500]}
        if isinstance(body, dict):
            return body
        return {"body": body}

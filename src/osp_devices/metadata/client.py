"""
OpenStack metadata service client.

Fetches the metadata documents over HTTP with a bounded retry/backoff policy
applied by the transport.
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from osp_devices.core.config import get_config

logger = logging.getLogger(__name__)

RETRY_STATUS_FORCELIST = (429, 500, 502, 503, 504)


class MetadataServiceClient:
    """
    Client for the OpenStack metadata service.

    Usage:
        client = MetadataServiceClient()
        body = client.get_body("meta_data.json")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize metadata service client.

        Args:
            base_url: Metadata service base URL (default: from config)
            timeout: Request timeout in seconds (default: from config)
            retry_attempts: Retries per request (default: from config)
            retry_backoff: Exponential backoff factor (default: from config)
            session: Pre-built requests session (retry policy is not applied to it)
        """
        config = get_config().metadata
        self.base_url = (base_url or config.service_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.timeout
        self.retry_attempts = (
            retry_attempts if retry_attempts is not None else config.retry_attempts
        )
        self.retry_backoff = (
            retry_backoff if retry_backoff is not None else config.retry_backoff
        )
        self.session = session or self._build_session()

    def _build_session(self) -> requests.Session:
        """Create a session whose adapter retries idempotent requests."""
        session = requests.Session()
        retry = Retry(
            total=self.retry_attempts,
            connect=self.retry_attempts,
            read=self.retry_attempts,
            backoff_factor=self.retry_backoff,
            status_forcelist=RETRY_STATUS_FORCELIST,
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def url_for(self, document: str) -> str:
        """Full URL of a metadata document."""
        return f"{self.base_url}/{document}"

    def get_body(self, document: str) -> bytes:
        """
        Fetch the raw body of a metadata document.

        Args:
            document: Document name (e.g. "meta_data.json")

        Returns:
            Response body

        Raises:
            requests.RequestException: If the request fails after retries
        """
        url = self.url_for(document)
        logger.debug(f"Getting body from {url}")
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content


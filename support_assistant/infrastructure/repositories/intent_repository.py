"""
Intent store implementations.

The catalog is curated elsewhere; these repositories only read snapshots of
it. Three backends are provided: an in-memory list (tests, embedding), a JSON
file and a remote HTTP catalog endpoint.
"""

from typing import Any, Dict, List, Optional, Sequence
import asyncio
import json
import logging
import os

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from support_assistant.domain.interfaces.repository_interface import IntentStoreInterface
from support_assistant.domain.models.intent import Intent
from support_assistant.utils.exceptions import ExternalServiceException, ValidationException

DEFAULT_CATALOG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    "data",
    "intents.json"
)


def parse_catalog(payload: Any) -> List[Intent]:
    """
    Convert a raw catalog payload into intents.

    Accepts either a list of intent records or an object with an
    ``intents`` list.

    Args:
        payload: Decoded JSON payload

    Returns:
        Intents in payload order

    Raises:
        ValidationException: If the payload is malformed or ids repeat
    """
    records = payload.get("intents") if isinstance(payload, dict) else payload
    if not isinstance(records, list):
        raise ValidationException(
            message="Intent catalog must be a list of intents",
            details={"type": type(records).__name__}
        )

    intents = [Intent.from_dict(record) for record in records]

    seen = set()
    for intent in intents:
        if intent.id in seen:
            raise ValidationException(
                message=f"Duplicate intent id in catalog: {intent.id}",
                details={"intent_id": intent.id}
            )
        seen.add(intent.id)
    return intents


class InMemoryIntentRepository(IntentStoreInterface):
    """Intent store backed by a list held in memory."""

    def __init__(self, intents: Optional[Sequence[Intent]] = None):
        self._intents: List[Intent] = list(intents or [])

    def replace(self, intents: Sequence[Intent]) -> None:
        self._intents = list(intents)

    async def list_intents(self) -> List[Intent]:
        return list(self._intents)


class JsonFileIntentRepository(IntentStoreInterface):
    """Intent store reading a JSON catalog file on every snapshot."""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize the repository.

        Args:
            path: Catalog file; defaults to the bundled sample catalog
        """
        self.path = path or DEFAULT_CATALOG_PATH
        self.logger = logging.getLogger(__name__)

    def _read(self) -> Any:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    async def list_intents(self) -> List[Intent]:
        try:
            payload = await asyncio.to_thread(self._read)
        except FileNotFoundError as e:
            self.logger.error(f"Intent catalog file not found: {self.path}")
            raise ExternalServiceException(
                service_name="intent_store",
                message=f"Intent catalog file not found: {self.path}",
                details={"path": self.path}
            ) from e
        except json.JSONDecodeError as e:
            self.logger.error(f"Intent catalog file is not valid JSON: {str(e)}")
            raise ValidationException(
                message="Intent catalog file is not valid JSON",
                details={"path": self.path, "error": str(e)}
            ) from e

        intents = parse_catalog(payload)
        self.logger.info(f"Loaded {len(intents)} intents from {self.path}")
        return intents


class HttpIntentRepository(IntentStoreInterface):
    """
    Intent store fetching the catalog from a remote endpoint.
    Transient transport errors are retried with exponential backoff.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize the repository.

        Args:
            url: Catalog endpoint returning the intents as JSON
            timeout: Request timeout in seconds
            http_client: Optional client to reuse (owned by the caller)
            headers: Extra request headers
        """
        self.url = url
        self.timeout = timeout
        self.headers = headers or {}
        self._client = http_client
        self.logger = logging.getLogger(__name__)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True
    )
    async def _fetch(self) -> Any:
        if self._client is not None:
            response = await self._client.get(self.url, headers=self.headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, headers=self.headers)
        response.raise_for_status()
        return response.json()

    async def list_intents(self) -> List[Intent]:
        try:
            payload = await self._fetch()
        except httpx.HTTPStatusError as e:
            self.logger.error(f"HTTP error fetching intent catalog: {str(e)}")
            raise ExternalServiceException(
                service_name="intent_store",
                message="Intent store returned an error",
                details={"url": self.url, "status": e.response.status_code}
            ) from e
        except httpx.HTTPError as e:
            self.logger.error(f"Request error fetching intent catalog: {str(e)}")
            raise ExternalServiceException(
                service_name="intent_store",
                message="Failed to connect to intent store",
                details={"url": self.url}
            ) from e
        except ValueError as e:
            raise ValidationException(
                message="Intent store returned invalid JSON",
                details={"url": self.url}
            ) from e

        intents = parse_catalog(payload)
        self.logger.info(f"Fetched {len(intents)} intents from {self.url}")
        return intents


def create_intent_store(
    store_type: str,
    catalog_path: Optional[str] = None,
    url: Optional[str] = None,
    timeout: float = 10.0
) -> IntentStoreInterface:
    """
    Build the configured intent store.

    Args:
        store_type: One of memory, file, http
        catalog_path: JSON catalog path for the file store
        url: Catalog endpoint for the http store
        timeout: Request timeout for the http store

    Returns:
        The intent store

    Raises:
        ValidationException: If the configuration is incomplete
    """
    if store_type == "memory":
        return InMemoryIntentRepository()
    if store_type == "file":
        return JsonFileIntentRepository(catalog_path)
    if store_type == "http":
        if not url:
            raise ValidationException(
                message="INTENT_STORE_URL is required for the http intent store",
                details={"store_type": store_type}
            )
        return HttpIntentRepository(url, timeout=timeout)
    raise ValidationException(
        message=f"Unsupported intent store type: {store_type}",
        details={"store_type": store_type}
    )

"""HTTP gateway to the Wolfram|Alpha sub-APIs.

One shared ``httpx.AsyncClient`` serves every sub-API. Each operation
issues exactly one logical GET (retried on 429/5xx) with the credential and
the configured units/location/scanner defaults merged under the caller's
overrides.

Sub-APIs and their payloads:
- /query       full multi-pod result (JSON)
- /simple      single rendered image (binary)
- /short       one-line answer (plain text)
- /spoken      spoken sentence (plain text)
- LLM API      conversational reply (JSON), absolute URL on another host
"""

import base64
from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from wolfram_knowledge.config import Settings
from wolfram_knowledge.exceptions import WolframAPIError
from wolfram_knowledge.models import ConversationResult, QueryResult
from wolfram_knowledge.utils.logger import get_logger
from wolfram_knowledge.utils.retry import RetryPolicy, with_retry

logger = get_logger(__name__)

USER_AGENT = "wolfram-knowledge/0.1"
CLOUD_API_KEY_HEADER = "X-Wolfram-Cloud-Api-Key"


class WolframEndpoint(str, Enum):
    """Sub-API paths relative to the standard API endpoint."""

    QUERY = "/query"
    SIMPLE = "/simple"
    SHORT = "/short"
    SPOKEN = "/spoken"


class WolframClient:
    """Async gateway for the Wolfram|Alpha APIs.

    Example:
        ```python
        client = WolframClient.create(settings)
        payload = await client.fetch_query("population of Tokyo")
        print(payload.numpods)
        await client.close()
        ```
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            settings: Validated service settings (credential, endpoints, defaults).
            http_client: Pre-built client. If None, one is created lazily.
            retry_policy: Retry budget. Defaults to the settings' retry values.
        """
        self._settings = settings
        self._client = http_client
        self._retry_policy = retry_policy or RetryPolicy(
            max_retries=settings.max_retries,
            initial_delay=settings.retry_delay,
        )

    @classmethod
    def create(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> "WolframClient":
        """Factory method to create WolframClient with settings-derived defaults."""
        return cls(settings=settings, http_client=http_client)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The shared httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._settings.api_endpoint,
                timeout=self._settings.timeout_seconds,
                headers={"User-Agent": USER_AGENT},
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def default_params(self, endpoint: WolframEndpoint) -> dict[str, Any]:
        """Default query parameters for one sub-API, before overrides."""
        params: dict[str, Any] = {
            "appid": self._settings.app_id,
            "units": self._settings.units,
            "location": self._settings.location,
        }
        if endpoint is WolframEndpoint.QUERY:
            formats = ["plaintext", "image"]
            if self._settings.output_format not in formats:
                formats.append(self._settings.output_format)
            params["format"] = ",".join(formats)
            params["output"] = "json"
            params["scanner"] = ",".join(self._settings.scanner_list) or None
        return params

    def build_params(
        self,
        endpoint: WolframEndpoint,
        text: str,
        overrides: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Merge defaults and overrides; overrides win, None drops a key.

        The credential and the input are always the gateway's own.
        """
        params = self.default_params(endpoint)
        params.update(overrides or {})
        params["appid"] = self._settings.app_id
        params["input"] = text
        return {key: value for key, value in params.items() if value is not None}

    async def _get(
        self,
        url: str,
        params: Mapping[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """GET with retry, translating every failure into WolframAPIError."""

        async def attempt() -> httpx.Response:
            response = await self.client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response

        try:
            return await with_retry(attempt, self._retry_policy)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("Wolfram API %s returned HTTP %d", url, status)
            raise WolframAPIError(f"Wolfram API returned HTTP {status} for {url}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error("Wolfram API %s request failed: %s", url, e)
            raise WolframAPIError(f"Wolfram API request to {url} failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise WolframAPIError(f"Wolfram API {url} returned a non-JSON body") from e

    async def fetch_query(self, text: str, overrides: Mapping[str, Any] | None = None) -> QueryResult:
        """Call the full query API.

        Args:
            text: Query input
            overrides: Extra or replacement query parameters (``podstate``, ``units``, ...)

        Returns:
            The parsed ``queryresult`` object. ``success`` may be False when the
            remote simply found nothing.

        Raises:
            WolframAPIError: On transport failure, an unexpected body, or an
                explicit remote error (e.g. an invalid appid)
        """
        url = WolframEndpoint.QUERY.value
        response = await self._get(url, self.build_params(WolframEndpoint.QUERY, text, overrides))
        data = self._json(response, url)

        payload = data.get("queryresult") if isinstance(data, dict) else None
        if not isinstance(payload, dict):
            raise WolframAPIError(f"Unexpected response format from {url}: missing 'queryresult'")

        try:
            result = QueryResult.model_validate(payload)
        except ValidationError as e:
            raise WolframAPIError(f"Unexpected response format from {url}: {e}") from e

        if not result.success and result.error_message:
            raise WolframAPIError(f"Wolfram query failed: {result.error_message}")

        return result

    async def fetch_simple(self, text: str, overrides: Mapping[str, Any] | None = None) -> tuple[bytes, str]:
        """Call the simple API.

        Returns:
            Tuple of (image bytes, content type)
        """
        url = WolframEndpoint.SIMPLE.value
        response = await self._get(url, self.build_params(WolframEndpoint.SIMPLE, text, overrides))
        content_type = response.headers.get("content-type", "image/gif").split(";")[0].strip()
        return response.content, content_type

    async def fetch_short(self, text: str, overrides: Mapping[str, Any] | None = None) -> str:
        """Call the short answer API and return its plain-text body."""
        url = WolframEndpoint.SHORT.value
        response = await self._get(url, self.build_params(WolframEndpoint.SHORT, text, overrides))
        return response.text

    async def fetch_spoken(self, text: str, overrides: Mapping[str, Any] | None = None) -> str:
        """Call the spoken answer API and return its plain-text body."""
        url = WolframEndpoint.SPOKEN.value
        response = await self._get(url, self.build_params(WolframEndpoint.SPOKEN, text, overrides))
        return response.text

    async def fetch_conversation(
        self,
        text: str,
        conversation_id: str | None = None,
        max_chars: int = 2000,
    ) -> ConversationResult:
        """Call the conversational/LLM API.

        Args:
            text: User utterance
            conversation_id: Remote thread to continue, if any
            max_chars: Upper bound on the reply length

        Returns:
            Parsed conversational reply (may carry ``error`` or ``expired``)
        """
        url = self._settings.llm_api_endpoint
        params: dict[str, Any] = {
            "appid": self._settings.app_id,
            "input": text,
            "maxchars": max_chars,
        }
        if conversation_id:
            params["conversationID"] = conversation_id

        headers = None
        if self._settings.cloud_api_key:
            headers = {CLOUD_API_KEY_HEADER: self._settings.cloud_api_key}

        response = await self._get(url, params, headers=headers)
        data = self._json(response, url)
        if not isinstance(data, dict):
            raise WolframAPIError(f"Unexpected response format from {url}: expected an object")

        try:
            return ConversationResult.model_validate(data)
        except ValidationError as e:
            raise WolframAPIError(f"Unexpected response format from {url}: {e}") from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def to_data_url(content: bytes, content_type: str = "image/gif") -> str:
    """Encode binary image content as a ``data:`` URL."""
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"

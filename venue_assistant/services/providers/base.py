from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

import requests
import structlog

from venue_assistant.core.config import Settings, current_settings, settings
from venue_assistant.core.errors import ConfigurationError, RateLimited, TransientProviderError
from venue_assistant.schemas.chat import ChatMessage
from venue_assistant.services.retrieval.ranker import RetrievalResult

logger = structlog.get_logger(__name__)


@dataclass
class ProviderRequest:
    user_message: str
    retrieval: RetrievalResult
    recent_history: list[ChatMessage] = field(default_factory=list)
    history_summary: str = ""


class AnswerProvider(ABC):
    """
    One remote text-generation endpoint. generate() makes exactly one attempt and
    either returns non-empty text or raises:
      - ConfigurationError: no usable API key, nothing was sent
      - RateLimited: HTTP 429
      - TransientProviderError: anything else (status, body, empty text, network)
    Retrying is the caller's job (see RetryPolicy).
    """
    name: str = ""          # response tag: "primary" / "secondary"
    label: str = ""         # human-readable, used in logs and errors
    max_chunks: int = 5

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        key_source: Callable[[], Settings] = current_settings,
    ):
        self._api_key = api_key
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self._key_source = key_source

    @abstractmethod
    def _key_from(self, cfg: Settings) -> str: ...

    @abstractmethod
    def build_request(self, request: ProviderRequest, api_key: str) -> dict[str, Any]:
        """kwargs for session.post(): url, json and headers/params."""

    @abstractmethod
    def extract_text(self, data: Any) -> str | None: ...

    def api_key(self) -> str:
        # read at call time so a key set after startup is picked up
        key = self._api_key if self._api_key is not None else self._key_from(self._key_source())
        return (key or "").strip()

    def is_configured(self) -> bool:
        return len(self.api_key()) >= settings.MIN_API_KEY_LENGTH

    def require_api_key(self) -> str:
        key = self.api_key()
        if len(key) < settings.MIN_API_KEY_LENGTH:
            raise ConfigurationError(f"{self.label} API key not configured")
        return key

    def generate(self, request: ProviderRequest) -> str:
        key = self.require_api_key()
        kwargs = self.build_request(request, key)

        try:
            r = self.session.post(timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransientProviderError(self.label, f"request failed: {exc}") from exc

        if r.status_code == 429:
            raise RateLimited(self.label)

        if not r.ok:
            raise TransientProviderError(
                self.label,
                f"API {r.status_code}: {self._error_detail(r)}",
                status_code=r.status_code,
            )

        try:
            data = r.json()
        except ValueError as exc:
            raise TransientProviderError(self.label, "unparseable response body") from exc

        text = self.extract_text(data)
        if not text or not text.strip():
            raise TransientProviderError(self.label, f"Empty response from {self.label}")

        logger.info("provider.success", provider=self.label, chars=len(text))
        return text.strip()

    @staticmethod
    def _error_detail(r: requests.Response) -> str:
        try:
            body = r.json()
        except ValueError:
            return "Unknown error"
        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict) and err.get("message"):
                return str(err["message"])
            if isinstance(err, str):
                return err
        return "Unknown error"

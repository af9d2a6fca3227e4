# lucidiq/llm_client.py
import logging
from typing import Dict, List, Optional

from openai import APIError, APIStatusError, OpenAI

from .config import Settings
from .errors import UpstreamError

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Chat-completion calls against an OpenAI-compatible endpoint (Perplexity).

    `client` can be any object exposing `chat.completions.create`; when it is
    omitted an `openai.OpenAI` client is built on first use from `settings`.
    Failures surface as UpstreamError with `failure_message` as the client
    facing error and the upstream body as details.
    """

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            kwargs = {
                "base_url": self.settings.base_url,
                "api_key": self.settings.require_api_key(),
                "max_retries": 0,
            }
            if self.settings.request_timeout is not None:
                kwargs["timeout"] = self.settings.request_timeout
            self._client = OpenAI(**kwargs)
        return self._client

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float,
        max_tokens: int,
        failure_message: str = "Completion failed",
        model: Optional[str] = None,
    ) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=model or self.settings.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APIStatusError as e:
            body = e.response.text if e.response is not None else str(e)
            logger.error("Completion API returned %s: %s", e.status_code, body)
            raise UpstreamError(failure_message, details=body) from e
        except APIError as e:
            logger.error("Completion API request failed: %s", e)
            raise UpstreamError(failure_message, details=str(e)) from e

        if not resp.choices:
            logger.error("Completion API returned no choices")
            raise UpstreamError(failure_message, details="Completion API returned no choices")
        return resp.choices[0].message.content or ""

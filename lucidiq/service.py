# lucidiq/service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from . import prompts
from .config import Settings
from .errors import ExtractionError, GatewayError, ValidationError
from .extractor import extract_structured
from .llm_client import CompletionClient
from .sanitizer import TRIM_CHARS, sanitize_input

logger = logging.getLogger(__name__)

PRODUCT_NAME_MAX = 200
MESSAGE_MAX = 500

ANALYZE_TEMPERATURE = 0.1
ANALYZE_MAX_TOKENS = 3000
CHAT_TEMPERATURE = 0.3
CHAT_MAX_TOKENS = 500


# Field types stay loose: non-string values are turned into "" by the
# sanitizer rather than rejected by validation.
class AnalyzeRequest(BaseModel):
    productName: Any = None
    productUrl: Any = None
    detectedPrice: Any = None
    detectedRating: Any = None
    detectedReviewCount: Any = None
    isBundle: Any = None


class ChatRequest(BaseModel):
    message: Any = None
    productContext: Any = None
    chatHistory: Optional[List[Any]] = None


def utc_timestamp() -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ProductService:
    def __init__(self, settings: Settings, completion_client: Optional[CompletionClient] = None):
        self.settings = settings
        self.completions = completion_client or CompletionClient(settings)

    def analyze(self, req: AnalyzeRequest) -> Dict[str, Any]:
        product_name = sanitize_input(req.productName, PRODUCT_NAME_MAX)
        if not product_name:
            raise ValidationError("Valid product name is required")
        self.settings.require_api_key()

        page_context = prompts.build_page_context(
            req.detectedPrice,
            req.detectedRating,
            req.detectedReviewCount,
            req.isBundle,
        )
        messages = prompts.build_analyze_messages(product_name, page_context)

        logger.info("[LucidIQ] Analyzing: %s", product_name)
        try:
            content = self.completions.complete(
                messages,
                temperature=ANALYZE_TEMPERATURE,
                max_tokens=ANALYZE_MAX_TOKENS,
                failure_message="Analysis failed",
            )
            analysis = extract_structured(content)
        except ExtractionError as e:
            logger.error("[LucidIQ] JSON parse error for %s: %s", product_name, e.error)
            raise
        except GatewayError as e:
            logger.error("[LucidIQ] Perplexity API error for %s: %s", product_name, e.details)
            raise

        analysis["analyzedAt"] = utc_timestamp()
        logger.info("[LucidIQ] Analysis complete for: %s", product_name)
        return analysis

    def chat(self, req: ChatRequest) -> Dict[str, Any]:
        message = sanitize_input(req.message, MESSAGE_MAX)
        if not message:
            raise ValidationError("Message is required")
        self.settings.require_api_key()

        messages = prompts.build_chat_messages(message, req.productContext, req.chatHistory)

        logger.info("[LucidIQ Chat] Question: %s", message)
        try:
            reply = self.completions.complete(
                messages,
                temperature=CHAT_TEMPERATURE,
                max_tokens=CHAT_MAX_TOKENS,
                failure_message="Failed to process question",
            )
        except GatewayError as e:
            logger.error("[LucidIQ Chat] API error for %r: %s", message, e.details)
            raise

        logger.info("[LucidIQ Chat] Response sent")
        return {"message": reply.strip(TRIM_CHARS)}

# lucidiq/extractor.py
"""
Recover a JSON object from a model reply.

Models wrap their JSON in markdown fences or surround it with prose, so the
reply is tried against an ordered chain of parse strategies. Each strategy
returns a dict or raises; the first dict wins.
"""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional

from .errors import ExtractionError
from .sanitizer import TRIM_CHARS

logger = logging.getLogger(__name__)

OPEN_FENCE = re.compile(r"```json\n?")
CLOSE_FENCE = re.compile(r"```\n?")

ParseStrategy = Callable[[str], Dict[str, Any]]


class NoCandidate(ValueError):
    """The strategy found nothing in the text to parse."""


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(literal: str) -> Optional[float]:
    # out-of-range literals such as 1e400 read as null
    value = float(literal)
    return value if math.isfinite(value) else None


def _loads(text: str) -> Any:
    return json.loads(text, parse_float=_finite_float, parse_constant=_reject_constant)


def _require_object(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


# --- strategies ------------------------------------------------------------
def strip_fences(raw_text: str) -> Dict[str, Any]:
    """Drop ```json / ``` markers and parse what is left."""
    cleaned = OPEN_FENCE.sub("", raw_text)
    cleaned = CLOSE_FENCE.sub("", cleaned).strip(TRIM_CHARS)
    return _require_object(_loads(cleaned))


def greedy_braces(raw_text: str) -> Dict[str, Any]:
    """
    Parse the span from the first "{" to the last "}" of the raw reply.

    The span is not balanced: text between an inner object and a later "}"
    is captured too and makes the parse fail.
    """
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end < start:
        raise NoCandidate("no brace-delimited span in reply")
    return _require_object(_loads(raw_text[start:end + 1]))


DEFAULT_STRATEGIES: List[ParseStrategy] = [strip_fences, greedy_braces]


def extract_structured(
    raw_text: str,
    strategies: Optional[List[ParseStrategy]] = None,
) -> Dict[str, Any]:
    """
    Return the first JSON object recovered by `strategies`, in order.

    Raises ExtractionError when every strategy fails. The error message says
    whether the last strategy found nothing to parse or failed to parse it.
    """
    chain = DEFAULT_STRATEGIES if strategies is None else strategies
    text = raw_text or ""
    reason = ExtractionError.NO_JSON
    for strategy in chain:
        try:
            return strategy(text)
        except NoCandidate as exc:
            logger.debug("%s: %s", strategy.__name__, exc)
            reason = ExtractionError.NO_JSON
        except ValueError as exc:
            logger.debug("%s: %s", strategy.__name__, exc)
            reason = ExtractionError.UNPARSEABLE
    raise ExtractionError(reason)

# lucidiq/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class GatewayError(Exception):
    """Base for errors that end a request with a JSON error envelope."""

    status_code = 500

    def __init__(self, error: str, *, details: Optional[str] = None):
        super().__init__(error)
        self.error = error
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(GatewayError):
    status_code = 400


class ConfigurationError(GatewayError):
    pass


class UpstreamError(GatewayError):
    pass


class ExtractionError(GatewayError):
    # reasons map to the two client-facing messages
    NO_JSON = "Invalid response format"
    UNPARSEABLE = "Failed to parse analysis"

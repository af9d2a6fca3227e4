# lucidiq/config.py
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.perplexity.ai"
DEFAULT_MODEL = "sonar"


def _split_csv(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    items = [part.strip() for part in raw.split(",")]
    return [item for item in items if item] or ["*"]


class Settings(BaseModel):
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    request_timeout: Optional[float] = Field(None, gt=0)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "Settings":
        """Read settings from the process environment (and a .env file)."""
        if dotenv:
            load_dotenv()
        timeout = os.getenv("LUCIDIQ_REQUEST_TIMEOUT")
        return cls(
            api_key=os.getenv("PERPLEXITY_API_KEY") or None,
            base_url=os.getenv("PERPLEXITY_BASE_URL", DEFAULT_BASE_URL),
            model=os.getenv("PERPLEXITY_MODEL", DEFAULT_MODEL),
            request_timeout=float(timeout) if timeout else None,
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("API key not configured")
        return self.api_key

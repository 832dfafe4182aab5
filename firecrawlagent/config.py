import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=False)

DEFAULT_FIRECRAWL_API_BASE_URL = "https://api.firecrawl.dev"
DEFAULT_SESSION_NAME = "shared-instance"

CREDENTIAL_MISSING = "missing"
CREDENTIAL_CONFIGURED = "configured"


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class FirecrawlConfig:
    api_key: str | None
    api_base_url: str = DEFAULT_FIRECRAWL_API_BASE_URL
    timeout_seconds: int = 30

    @property
    def credential_status(self) -> str:
        if self.api_key is None or not self.api_key.strip():
            return CREDENTIAL_MISSING
        return CREDENTIAL_CONFIGURED

    @property
    def has_credential(self) -> bool:
        return self.credential_status == CREDENTIAL_CONFIGURED


@dataclass(frozen=True)
class Settings:
    firecrawl_api_key: str | None
    firecrawl_api_base_url: str
    firecrawl_timeout_seconds: int
    session_name: str
    log_level: str

    def firecrawl(self) -> FirecrawlConfig:
        return FirecrawlConfig(
            api_key=self.firecrawl_api_key,
            api_base_url=self.firecrawl_api_base_url,
            timeout_seconds=self.firecrawl_timeout_seconds,
        )


def load_settings() -> Settings:
    return Settings(
        firecrawl_api_key=(os.getenv("FIRECRAWL_API_KEY") or "").strip() or None,
        firecrawl_api_base_url=(
            os.getenv("FIRECRAWL_API_BASE_URL") or DEFAULT_FIRECRAWL_API_BASE_URL
        ).strip().rstrip("/"),
        firecrawl_timeout_seconds=max(
            1, min(300, _as_int(os.getenv("FIRECRAWL_TIMEOUT_SECONDS"), 30))
        ),
        session_name=(os.getenv("MCP_SESSION_NAME") or DEFAULT_SESSION_NAME).strip(),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )


def configure_logging(level: str) -> None:
    # stderr keeps log lines out of any stdout-based protocol stream
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


settings = load_settings()

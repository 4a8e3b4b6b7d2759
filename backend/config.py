import os
from dataclasses import dataclass
from typing import Optional


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass
class Settings:
    # MongoDB
    mongodb_uri: Optional[str] = None
    mongodb_db: str = "ai_summary_extension"
    mongodb_collection: str = "summaries"

    # Gemini
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-pro"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    max_text_length: int = 4000

    # Google sign-in
    google_client_id: Optional[str] = None

    # Server
    allowed_origin_regex: str = r"^chrome-extension://.*$"
    port: int = 3000
    log_level: str = "INFO"
    http_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            mongodb_uri=os.getenv("MONGODB_URI"),
            mongodb_db=os.getenv("MONGODB_DB", "ai_summary_extension"),
            mongodb_collection=os.getenv("MONGODB_COLLECTION", "summaries"),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-pro"),
            gemini_base_url=os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
            ),
            max_text_length=int(os.getenv("MAX_TEXT_LENGTH", 4000)),
            google_client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
            allowed_origin_regex=os.getenv("ALLOWED_ORIGIN_REGEX", r"^chrome-extension://.*$"),
            port=int(os.getenv("PORT", 3000)),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            http_timeout=_optional_float(os.getenv("HTTP_TIMEOUT")),
        )

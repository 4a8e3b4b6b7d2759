import logging
from dataclasses import asdict, dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class SummaryGenerationError(Exception):
    pass


@dataclass
class GenerationConfig:
    temperature: float = 0.3
    maxOutputTokens: int = 1024
    topP: float = 0.8
    topK: int = 40


class GeminiClient:
    """Thin wrapper over the Gemini `generateContent` REST endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-pro",
        base_url: str = DEFAULT_BASE_URL,
        generation_config: Optional[GenerationConfig] = None,
        timeout: Optional[float] = None,
    ):
        if not api_key:
            logger.warning("GEMINI_API_KEY not set, summary requests will fail")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.generation_config = generation_config or GenerationConfig()
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate(self, prompt: str) -> str:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": asdict(self.generation_config),
        }

        try:
            res = requests.post(
                self.endpoint,
                json=body,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key or "",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SummaryGenerationError(f"Gemini request failed: {e}") from e

        if not res.ok:
            raise SummaryGenerationError(f"Gemini API error (status {res.status_code})")

        try:
            data = res.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise SummaryGenerationError("Gemini returned unexpected structure") from e

from typing import Tuple

from services.llm_client import GeminiClient

MAX_TEXT_LENGTH = 4000
ELLIPSIS = "..."


def trim_text(text: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Cuts text down to `max_length` characters and marks the cut with an ellipsis.
    """
    if len(text) > max_length:
        return text[:max_length] + ELLIPSIS
    return text


def build_prompt(text: str) -> str:
    return f"Provide a very concise summary of this text (max 250 words): {text}"


def summarize_text(
    client: GeminiClient,
    text: str,
    max_length: int = MAX_TEXT_LENGTH,
) -> Tuple[str, str]:
    """
    Returns (sent_text, summary). `sent_text` is what the provider saw,
    which is also what gets stored.
    """
    trimmed = trim_text(text, max_length)
    summary = client.generate(build_prompt(trimmed))
    return trimmed, summary

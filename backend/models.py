# models.py
from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field

# ============================ API SCHEMAS ============================

class SummaryRequest(BaseModel):
    text: str

class SummaryResponse(BaseModel):
    summary: str

class ErrorResponse(BaseModel):
    error: str

class HealthResponse(BaseModel):
    status: str = "ok"

# ============================ IDENTITY ============================

class GoogleUser(BaseModel):
    user_id: str
    email: str

# ============================ STORED DOCUMENT ============================

class SummaryRecord(BaseModel):
    user_id: str
    email: str
    text: str
    summary: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> Dict[str, Any]:
        """Shape used in the `summaries` collection."""
        return {
            "userId": self.user_id,
            "email": self.email,
            "text": self.text,
            "summary": self.summary,
            "timestamp": self.timestamp,
        }

"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    image: str = Field(..., description="Base64-encoded PNG/JPEG/WebP image, optionally as a data URL")
    options: dict[str, bool] = Field(
        default_factory=dict,
        description="Optional stage switches (skip_patterns, skip_structure, skip_accessibility, skip_responsiveness)",
    )

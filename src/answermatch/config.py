from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from answermatch.utils.io import read_yaml

load_dotenv()

DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


class ScoringConfig(BaseModel):
    threshold: float = Field(0.75, description="Default acceptance threshold on the combined score.")
    semantic_weight: float = Field(0.8, description="Weight of the embedding cosine similarity.")
    lexical_weight: float = Field(0.2, description="Weight of the Jaro-Winkler similarity.")
    validate_threshold: bool = Field(
        True,
        description="Reject thresholds outside [0, 1]. Disable to pass them through unclamped.",
    )


class EmbeddingConfig(BaseModel):
    model_name: str = Field(
        default_factory=lambda: os.getenv("ANSWERMATCH_MODEL") or DEFAULT_MODEL,
        description="HuggingFace sentence-transformers model name.",
    )
    device: str | None = Field(
        default_factory=lambda: os.getenv("ANSWERMATCH_DEVICE") or None,
        description="cuda | cpu | mps, auto-detected if None.",
    )
    batch_size: int = 32


class AppConfig(BaseModel):
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        return AppConfig()
    raw: dict[str, Any] = read_yaml(path)
    return AppConfig.model_validate(raw)

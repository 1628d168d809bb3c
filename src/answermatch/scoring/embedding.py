"""
Semantic similarity via sentence embeddings.

The comparer only sees the narrow SemanticSimilarityPort interface; the
sentence-transformers model and its tensors stay behind
SentenceTransformerEmbedder.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Protocol

import numpy as np

from answermatch.config import EmbeddingConfig
from answermatch.errors import ProviderFailureError

logger = logging.getLogger(__name__)


class SemanticSimilarityPort(Protocol):
    async def embed(self, texts: Sequence[str]) -> Sequence[Sequence[float]]:
        """Return one L2-normalized, mean-pooled vector per text, in order."""
        ...

    def cosine_similarity(self, a: Sequence[float], b: Sequence[float]) -> float: ...


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product over norms; 0.0 if either vector has zero norm."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def check_embeddings(vectors: Any, expected: int) -> list[np.ndarray]:
    """
    Validate provider output and convert it to float arrays.

    Raises:
        ProviderFailureError: wrong count, unequal or zero lengths,
            non-numeric or non-finite values
    """
    try:
        arrays = [np.asarray(v, dtype=np.float64).reshape(-1) for v in vectors]
    except (TypeError, ValueError) as exc:
        raise ProviderFailureError(f"Embedding provider returned non-numeric output: {exc}") from exc

    if len(arrays) != expected:
        raise ProviderFailureError(
            f"Embedding provider returned {len(arrays)} vectors, expected {expected}"
        )
    lengths = {a.shape[0] for a in arrays}
    if len(lengths) != 1 or 0 in lengths:
        raise ProviderFailureError(
            f"Embedding provider returned vectors of inconsistent length: {sorted(lengths)}"
        )
    for a in arrays:
        if not np.all(np.isfinite(a)):
            raise ProviderFailureError("Embedding provider returned non-finite values")
    return arrays


class SentenceTransformerEmbedder:
    """
    Embedding provider backed by a sentence-transformers model.

    The model is loaded lazily on first use and kept for the lifetime of the
    instance. Share one instance across requests.
    """

    def __init__(
        self,
        model_name: str,
        device: str | None = None,
        batch_size: int = 32,
    ):
        """
        Args:
            model_name: HuggingFace model name (e.g., "sentence-transformers/all-MiniLM-L6-v2")
            device: Device (cuda/cpu), auto-detected if None
            batch_size: Encoding batch size
        """
        self.model_name = model_name
        self.device = device
        self.batch_size = batch_size
        self._model = None
        self._load_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, cfg: EmbeddingConfig) -> SentenceTransformerEmbedder:
        return cls(cfg.model_name, device=cfg.device, batch_size=cfg.batch_size)

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    @property
    def loaded_device(self) -> str | None:
        if self._model is None:
            return None
        return str(self._model.device)

    def _load_model(self):
        from sentence_transformers import SentenceTransformer

        logger.info(f"Loading embedding model: {self.model_name}")
        model = SentenceTransformer(self.model_name, device=self.device)
        logger.info(f"Embedding model loaded on {model.device}")
        return model

    async def load(self) -> None:
        if self._model is not None:
            return
        async with self._load_lock:
            if self._model is None:
                self._model = await asyncio.to_thread(self._load_model)

    def _encode(self, texts: list[str]) -> np.ndarray:
        return self._model.encode(
            texts,
            batch_size=self.batch_size,
            show_progress_bar=False,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )

    async def embed(self, texts: Sequence[str]) -> Sequence[Sequence[float]]:
        await self.load()
        return await asyncio.to_thread(self._encode, list(texts))

    def cosine_similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        return cosine_similarity(a, b)

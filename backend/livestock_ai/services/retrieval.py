"""Vector similarity and top-K retrieval over an in-memory chunk corpus."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from livestock_ai.models.rag import SimilarityResult, TextChunk

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero norm. Raises ``ValueError`` when
    the dimensions differ.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(
            f"Cannot compare vectors of different dimensions: {va.shape[0]} != {vb.shape[0]}"
        )
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    score = float(np.dot(va, vb)) / (norm_a * norm_b)
    # Floating point error can push |score| slightly past 1.
    return float(np.clip(score, -1.0, 1.0))


def top_k(
    corpus: Sequence[TextChunk],
    query_vector: Sequence[float],
    k: int,
) -> list[SimilarityResult]:
    """Rank every chunk against ``query_vector`` and return the best ``k``.

    Ordering is descending by score; ties keep corpus order (``sorted`` is
    stable). An empty corpus or ``k <= 0`` yields ``[]``.
    """
    if k <= 0 or not corpus:
        return []

    scored = [
        SimilarityResult(chunk=chunk, score=cosine_similarity(query_vector, chunk.embedding))
        for chunk in corpus
    ]
    ranked = sorted(scored, key=lambda r: r.score, reverse=True)[:k]

    logger.debug(
        "Ranked %d chunks, kept %d (scores: %s)",
        len(scored),
        len(ranked),
        ", ".join(f"{r.score:.3f}" for r in ranked),
    )
    return ranked

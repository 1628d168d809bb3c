# src/answermatch/cli.py
from __future__ import annotations

import asyncio
import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any

import typer

from answermatch.config import AppConfig, load_config
from answermatch.errors import AnswerMatchError, ProviderFailureError
from answermatch.scoring.combiner import AnswerComparer
from answermatch.scoring.embedding import SemanticSimilarityPort, SentenceTransformerEmbedder
from answermatch.scoring.types import AnswerPair
from answermatch.utils.io import iter_jsonl, write_jsonl
from answermatch.utils.logging import setup_logging

app = typer.Typer(add_completion=False, help="answermatch: graded free-text answer matching.")
logger = logging.getLogger(__name__)


def build_provider(cfg: AppConfig) -> SemanticSimilarityPort:
    return SentenceTransformerEmbedder.from_config(cfg.embedding)


def _exit_code(err: AnswerMatchError) -> int:
    return 1 if isinstance(err, ProviderFailureError) else 2


# ============================================================================
# compare
# ============================================================================
@app.command()
def compare(
    user_answer: str = typer.Argument(..., help="The answer given by the user."),
    correct_answer: str = typer.Argument(..., help="The reference answer."),
    threshold: float | None = typer.Option(
        None, "--threshold", "-t", help="Acceptance threshold (None=use config)."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str = typer.Option("WARNING", "--log-level"),
) -> None:
    """Score one answer against a reference and print the decision as JSON."""
    setup_logging(log_level)
    cfg = load_config(config)
    comparer = AnswerComparer(build_provider(cfg), cfg.scoring)

    try:
        decision = asyncio.run(comparer.decide(user_answer, correct_answer, threshold))
    except AnswerMatchError as err:
        typer.echo(json.dumps(err.to_dict()), err=True)
        raise typer.Exit(code=_exit_code(err))

    typer.echo(json.dumps(decision.to_dict(), indent=2))


# ============================================================================
# batch
# ============================================================================
async def _score_rows(
    comparer: AnswerComparer,
    rows: list[tuple[int, Any]],
    default_threshold: float,
) -> list[dict[str, Any]]:
    results = []
    for line_no, obj in rows:
        row_id = obj.get("id") if isinstance(obj, dict) else None
        try:
            if isinstance(obj, AnswerMatchError):
                raise obj
            payload = obj if isinstance(obj, dict) else {}
            pair = AnswerPair.from_payload(payload, default_threshold)
            out = (await comparer.decide_pair(pair)).to_dict()
        except AnswerMatchError as err:
            logger.warning(f"Line {line_no}: {err.kind}: {err}")
            out = err.to_dict()
        if row_id is not None:
            out = {"id": row_id, **out}
        results.append(out)
    return results


@app.command()
def batch(
    input_path: Path = typer.Option(..., "--input", "-i", exists=True, readable=True),
    out: Path = typer.Option(..., "--out", "-o", help="Output JSONL of decisions."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str = typer.Option("INFO", "--log-level"),
) -> None:
    """Score a JSONL file of {userAnswer, correctAnswer, threshold?, id?} records."""
    setup_logging(log_level)
    cfg = load_config(config)
    comparer = AnswerComparer(build_provider(cfg), cfg.scoring)

    rows = list(iter_jsonl(input_path))
    logger.info(f"Scoring {len(rows)} pairs from {input_path}")
    results = asyncio.run(_score_rows(comparer, rows, cfg.scoring.threshold))
    write_jsonl(out, results)

    counts = Counter(
        r["error"] if "error" in r else ("correct" if r["isCorrect"] else "incorrect")
        for r in results
    )
    logger.info(f"Wrote {len(results)} results to {out}")
    typer.echo(json.dumps(dict(sorted(counts.items()))))


# ============================================================================
# warmup
# ============================================================================
@app.command()
def warmup(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str = typer.Option("INFO", "--log-level"),
) -> None:
    """Load the embedding model once and report whether it is ready."""
    setup_logging(log_level)
    cfg = load_config(config)
    embedder = SentenceTransformerEmbedder.from_config(cfg.embedding)

    try:
        asyncio.run(embedder.load())
    except Exception as exc:
        logger.error(f"Model load failed: {exc}")
        typer.echo(json.dumps({"status": "error", "modelLoaded": False, "message": str(exc)}))
        raise typer.Exit(code=1)

    typer.echo(
        json.dumps(
            {
                "status": "ok",
                "model": embedder.model_name,
                "modelLoaded": embedder.is_loaded,
                "device": embedder.loaded_device,
            }
        )
    )


if __name__ == "__main__":
    app()

"""AI spending summary backed by the OpenAI Responses API.

Optional capability: nothing in the ledger or view code depends on it. A
client object can be injected (tests pass a stub); otherwise one is created
from ``OPENAI_API_KEY``.
"""

from __future__ import annotations

import time
from typing import Any, Optional, Sequence

import openai

from ..logging_config import get_logger
from ..models.notebook import Transaction, TransactionType
from .export_csv import format_number

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MAX_TRANSACTIONS = 20


class InsightError(RuntimeError):
    """The spending summary could not be produced."""


class NetworkError(InsightError):
    """The service could not be reached or failed server-side."""


class RateLimitError(InsightError):
    """The service rejected the request because of rate limiting."""


def summarize_lines(transactions: Sequence[Transaction], limit: int = MAX_TRANSACTIONS) -> str:
    """One line per transaction: ``2024-01-01: Coffee (Food & Drink) - -4.5``."""

    lines = []
    for txn in list(transactions)[:limit]:
        sign = "-" if txn.type is TransactionType.EXPENDITURE else "+"
        lines.append(f"{txn.date}: {txn.item} ({txn.category or ''}) - {sign}{format_number(txn.amount)}")
    return "\n".join(lines)


def build_prompt(transactions: Sequence[Transaction], currency: str) -> str:
    return (
        "Analyze these recent financial transactions and provide a 3-sentence summary of "
        "spending habits and one specific tip to save money. "
        f"Currency is {currency}. Transactions:\n{summarize_lines(transactions)}"
    )


def _extract_text(resp: Any) -> str:
    """Prefer ``resp.output_text``; fall back to ``resp.output[0].content[0].text``."""

    text: Optional[str] = getattr(resp, "output_text", None)
    if not text:
        output = getattr(resp, "output", None) or []
        content = getattr(output[0], "content", None) if output else None
        if content:
            candidate = getattr(content[0], "text", None)
            text = candidate if isinstance(candidate, str) else getattr(candidate, "value", None)
    if not text or not isinstance(text, str):
        raise InsightError("Unexpected Responses API shape; unable to locate text output")
    return text.strip()


def _create_client(api_key: Optional[str]) -> Any:
    if not api_key:
        raise InsightError("OPENAI_API_KEY is required for spending insights")
    return openai.OpenAI(api_key=api_key)


def summarize_spending(
    transactions: Sequence[Transaction],
    currency: str,
    *,
    client: Any = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> str:
    """Return a short natural-language summary of ``transactions``.

    Raises:
        ValueError: if there are no transactions to summarize.
        RateLimitError: when the service answers HTTP 429.
        NetworkError: on connection failures, timeouts and 5xx answers.
        InsightError: for any other API failure or an unusable response.
    """

    if not transactions:
        raise ValueError("No transactions to summarize")

    client = client if client is not None else _create_client(api_key)
    model_name = model or DEFAULT_MODEL
    prompt = build_prompt(transactions, currency)

    t0 = time.perf_counter()
    try:
        resp = client.responses.create(model=model_name, input=prompt)
    except openai.RateLimitError as exc:
        logger.error("Insight request rate limited", extra={"model": model_name})
        raise RateLimitError("Rate limit reached; try again later") from exc
    except (openai.APIConnectionError, openai.InternalServerError) as exc:
        logger.error(
            "Insight service unreachable", extra={"model": model_name, "error": exc.__class__.__name__}
        )
        raise NetworkError("Could not reach the insight service") from exc
    except openai.OpenAIError as exc:
        logger.error(
            "Insight request failed", extra={"model": model_name, "error": exc.__class__.__name__}
        )
        raise InsightError(f"Insight request failed: {exc}") from exc

    text = _extract_text(resp)
    logger.info(
        "Insight generated",
        extra={
            "model": model_name,
            "transactions": min(len(transactions), MAX_TRANSACTIONS),
            "latency_ms": round((time.perf_counter() - t0) * 1000.0, 2),
        },
    )
    return text


__all__ = [
    "InsightError",
    "NetworkError",
    "RateLimitError",
    "build_prompt",
    "summarize_lines",
    "summarize_spending",
]

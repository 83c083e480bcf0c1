"""Lightweight Telegram notification for long-running puzzle searches.

Sends plain-text messages to a Telegram channel via the Bot API for:
- Search start
- Solution-count milestones
- Errors
- Final results summary

No retry logic; progress updates are non-critical.
"""

from __future__ import annotations

import os
from typing import Any

import httpx


DEFAULT_CHAT_ID = os.environ.get("TELEGRAM_CHAT_ID", "")
TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
) -> bool:
    """Send a plain-text message to a Telegram channel.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.

    Returns:
        True if message was sent successfully, False otherwise.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    if not token:
        return False

    chat_id = chat_id or DEFAULT_CHAT_ID
    if not chat_id:
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
            return bool(data.get("ok", False))
    except (httpx.HTTPError, ValueError):
        return False


def format_search_start(
    puzzle_name: str,
    box_dims: tuple[int, int, int],
    piece_count: int,
    max_solutions: int | None,
) -> str:
    """Format search start notification message.

    Example:
        >>> print(format_search_start("soma-3x3x3", (3, 3, 3), 7, None))
        Search Started
        Puzzle: soma-3x3x3
        Box: 3 x 3 x 3
        Pieces: 7
        Cap: all solutions
    """
    cap = "all solutions" if max_solutions is None else f"{max_solutions} solution(s)"
    return (
        f"Search Started\n"
        f"Puzzle: {puzzle_name}\n"
        f"Box: {box_dims[0]} x {box_dims[1]} x {box_dims[2]}\n"
        f"Pieces: {piece_count}\n"
        f"Cap: {cap}"
    )


def format_solution_milestone(
    solutions_found: int,
    nodes_visited: int,
    elapsed_seconds: float,
) -> str:
    """Format a solution-count milestone notification.

    Example:
        >>> print(format_solution_milestone(100, 52000, 12.5))
        Progress Update
        Solutions: 100
        Nodes: 52000
        Elapsed: 12.5s
    """
    return (
        f"Progress Update\n"
        f"Solutions: {solutions_found}\n"
        f"Nodes: {nodes_visited}\n"
        f"Elapsed: {elapsed_seconds:.1f}s"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("PuzzleDefinitionError", "empty piece", {"piece_id": 3}))
        Error: PuzzleDefinitionError
        empty piece
        Context: piece_id=3
    """
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    puzzle_name: str,
    solutions_found: int,
    nodes_visited: int,
    runtime_seconds: float,
    cancelled: bool,
) -> str:
    """Format final search results summary.

    Example:
        >>> print(format_final_summary("single-cube", 1, 2, 0.01, False))
        Search Complete
        Puzzle: single-cube
        Solutions: 1
        Nodes: 2
        Runtime: 0.0 minutes
    """
    status = "Search Cancelled" if cancelled else "Search Complete"
    runtime_minutes = runtime_seconds / 60
    return (
        f"{status}\n"
        f"Puzzle: {puzzle_name}\n"
        f"Solutions: {solutions_found}\n"
        f"Nodes: {nodes_visited}\n"
        f"Runtime: {runtime_minutes:.1f} minutes"
    )

"""Token estimation utilities for context budgeting.

Uses a ~4 characters per token heuristic rather than a model tokenizer, so
estimates work offline for any OpenAI-compatible endpoint.
"""

import math
from typing import NamedTuple

CHARS_PER_TOKEN = 4


class TruncationResult(NamedTuple):
    text: str
    was_truncated: bool
    estimated_tokens: int


def estimate_tokens(text: str) -> int:
    """Estimate token count of text (ceil(len / 4), 0 for empty text)."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def truncate_to_token_limit(text: str, max_tokens: int) -> TruncationResult:
    """
    Truncate text to fit within a token limit.

    Cuts at max_tokens * 4 characters, backs up to the last space if that
    loses less than 10% of the allowance, and appends "...".

    Args:
        text: Input text
        max_tokens: Maximum allowed tokens

    Returns:
        TruncationResult with the (possibly) truncated text
    """
    estimated = estimate_tokens(text)
    if estimated <= max_tokens:
        return TruncationResult(text, False, estimated)

    max_chars = max_tokens * CHARS_PER_TOKEN
    truncated = text[:max_chars]
    last_space = truncated.rfind(" ")

    if last_space > max_chars * 0.9:
        truncated = truncated[:last_space]

    truncated = truncated.strip() + "..."
    return TruncationResult(truncated, True, estimate_tokens(truncated))


def calculate_available_tokens(
    context_tokens: int, max_context_tokens: int, reserved_tokens: int = 100
) -> int:
    """Tokens left for the response after context and reserved prompt tokens (never negative)."""
    return max(0, max_context_tokens - context_tokens - reserved_tokens)


def batch_messages(messages: list[str], max_tokens: int) -> list[list[str]]:
    """
    Group messages into batches that each fit within max_tokens.

    A message that alone exceeds the limit is truncated and placed in a
    batch of its own.

    Args:
        messages: Message texts in order
        max_tokens: Token limit per batch

    Returns:
        Batches of messages, order preserved
    """
    batches: list[list[str]] = []
    current: list[str] = []
    current_tokens = 0

    for message in messages:
        message_tokens = estimate_tokens(message)

        if message_tokens > max_tokens:
            if current:
                batches.append(current)
                current = []
                current_tokens = 0
            batches.append([truncate_to_token_limit(message, max_tokens).text])
            continue

        if current_tokens + message_tokens > max_tokens:
            batches.append(current)
            current = [message]
            current_tokens = message_tokens
        else:
            current.append(message)
            current_tokens += message_tokens

    if current:
        batches.append(current)

    return batches

"""Core domain models for collected samples."""

import math
from dataclasses import dataclass

# Largest value an SQLite INTEGER column can hold
MAX_BLOCK_HEIGHT = 2**63 - 1


def validate_reading(block_height: int, btc_price: float) -> None:
    """Reject readings that can never be stored.

    Args:
        block_height: Chain tip height. Must be an int between 0 and
            MAX_BLOCK_HEIGHT.
        btc_price: Spot price. Must be a finite, non-negative number.

    Raises:
        ValueError: If either value is out of range or of the wrong type.
    """
    # bool is an int subclass but never a valid height
    if isinstance(block_height, bool) or not isinstance(block_height, int):
        raise ValueError(f"block_height must be an int, got {block_height!r}")
    if not 0 <= block_height <= MAX_BLOCK_HEIGHT:
        raise ValueError(
            f"block_height must be between 0 and {MAX_BLOCK_HEIGHT}, got {block_height}"
        )
    if isinstance(btc_price, bool) or not isinstance(btc_price, (int, float)):
        raise ValueError(f"btc_price must be a number, got {btc_price!r}")
    if not math.isfinite(btc_price) or btc_price < 0:
        raise ValueError(f"btc_price must be finite and >= 0, got {btc_price}")


@dataclass(frozen=True)
class Sample:
    """One recorded observation of both metrics.

    Attributes:
        sequence_id: Store-assigned id, strictly increasing with each append.
        block_height: Chain tip height at fetch time.
        btc_price: Spot price in USD at fetch time.
        observed_at: Store-assigned UTC timestamp ("YYYY-MM-DD HH:MM:SS").
    """

    sequence_id: int
    block_height: int
    btc_price: float
    observed_at: str

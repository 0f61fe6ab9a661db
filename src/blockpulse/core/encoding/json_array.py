"""JSON array encoder for samples."""

import json
from collections.abc import Iterable
from typing import Any

from blockpulse.core.models import Sample


def sample_to_dict(sample: Sample) -> dict[str, Any]:
    """Map a sample to its wire object.

    The sequence id is internal to the store and is not exposed.
    """
    return {
        "block_height": sample.block_height,
        "btc_price": sample.btc_price,
        "timestamp": sample.observed_at,
    }


def encode_samples(samples: Iterable[Sample]) -> str:
    """Encode samples to a JSON array, preserving their order.

    Args:
        samples: An iterable of Sample objects, typically newest first.

    Returns:
        JSON array string. "[]" if there are no samples.
    """
    return json.dumps([sample_to_dict(s) for s in samples])

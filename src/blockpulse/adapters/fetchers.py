"""HTTP fetchers for chain tip height and BTC spot price.

Each fetcher performs exactly one request with the given httpx client and
parses one scalar out of the response body. Failures are raised as
FetchError; there is no retry and no caching.
"""

import logging
import math
from typing import Any

import httpx

from blockpulse.core.errors import FetchError, FetchErrorKind
from blockpulse.core.models import MAX_BLOCK_HEIGHT

logger = logging.getLogger(__name__)

BLOCK_HEIGHT_URL = "https://blockstream.info/api/blocks/tip/height"
BTC_PRICE_URL = (
    "https://api.coingecko.com/api/v3/simple/price?ids=bitcoin&vs_currencies=usd"
)


async def _get_json(client: httpx.AsyncClient, url: str, metric: str) -> Any:
    """GET ``url`` and decode its JSON body, mapping failures to FetchError."""
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(
            metric,
            FetchErrorKind.NETWORK,
            f"HTTP {e.response.status_code}: {e.response.text[:200]}",
        ) from e
    except httpx.HTTPError as e:
        raise FetchError(
            metric, FetchErrorKind.NETWORK, f"{type(e).__name__}: {e}"
        ) from e

    try:
        return response.json()
    except ValueError as e:
        raise FetchError(
            metric, FetchErrorKind.PARSE, f"invalid JSON body: {e}"
        ) from e


async def fetch_block_height(
    client: httpx.AsyncClient, url: str = BLOCK_HEIGHT_URL
) -> int:
    """Fetch the current chain tip height.

    The endpoint answers with a bare integer body, e.g. ``800000``.

    Raises:
        FetchError: On transport errors, non-2xx responses, or a body that is
            not an integer between 0 and MAX_BLOCK_HEIGHT.
    """
    data = await _get_json(client, url, "block_height")
    if (
        isinstance(data, bool)
        or not isinstance(data, int)
        or not 0 <= data <= MAX_BLOCK_HEIGHT
    ):
        raise FetchError(
            "block_height",
            FetchErrorKind.PARSE,
            f"expected an integer between 0 and {MAX_BLOCK_HEIGHT}, got {data!r}",
        )
    logger.debug("Fetched block height", extra={"block_height": data})
    return data


async def fetch_btc_price(
    client: httpx.AsyncClient, url: str = BTC_PRICE_URL
) -> float:
    """Fetch the current BTC spot price in USD.

    The endpoint answers with ``{"bitcoin": {"usd": <number>}}``.

    Raises:
        FetchError: On transport errors, non-2xx responses, or a body without
            a finite, non-negative ``bitcoin.usd`` number.
    """
    data = await _get_json(client, url, "btc_price")
    try:
        price = data["bitcoin"]["usd"]
    except (KeyError, TypeError) as e:
        raise FetchError(
            "btc_price",
            FetchErrorKind.PARSE,
            f"missing bitcoin.usd in {str(data)[:200]}",
        ) from e
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise FetchError(
            "btc_price", FetchErrorKind.PARSE, f"expected a number, got {price!r}"
        )
    price = float(price)
    if not math.isfinite(price) or price < 0:
        raise FetchError(
            "btc_price",
            FetchErrorKind.PARSE,
            f"expected a finite non-negative price, got {price}",
        )
    logger.debug("Fetched BTC price", extra={"btc_price": price})
    return price

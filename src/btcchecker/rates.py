# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Current BTC price from a CoinGecko-style "simple price" endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from btcchecker.errors import UpstreamError

logger = logging.getLogger(__name__)

COIN_ID = "bitcoin"


@dataclass(frozen=True)
class BTCRate:
    currency: str
    rate: float


class RateClient:
    def __init__(self, url: str, *, currency: str = "uah", timeout: float = 10.0) -> None:
        self.url = url
        self.currency = currency.lower()
        self.timeout = timeout

    def current(self) -> BTCRate:
        try:
            r = requests.get(
                self.url,
                params={"ids": COIN_ID, "vs_currencies": self.currency},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            logger.warning("rate provider request failed: %s", e)
            raise UpstreamError("rate provider unavailable") from e
        except ValueError as e:
            raise UpstreamError("rate provider returned invalid JSON") from e

        try:
            value = float(data[COIN_ID][self.currency])
        except (KeyError, TypeError, ValueError):
            logger.warning("unexpected rate payload: %r", data)
            raise UpstreamError(f"no {COIN_ID}/{self.currency} rate in response") from None
        return BTCRate(currency=self.currency, rate=value)

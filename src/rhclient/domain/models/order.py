"""Order specification domain model"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class OrderSide(Enum):
    """Direction of an order"""

    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class InstrumentReference:
    """Instrument an order targets (API instrument url plus ticker)"""

    url: str
    symbol: str


@dataclass(frozen=True)
class OrderSpecification:
    """Input to the place-order operations

    ``time_in_force`` defaults to good-for-day ("gfd").
    """

    instrument: InstrumentReference
    quantity: int | float
    bid_price: float | None = None
    stop_price: float | None = None
    side: OrderSide = OrderSide.BUY
    time_in_force: str = "gfd"
    trigger: str = "immediate"
    order_type: str = "market"

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "OrderSpecification":
        """Build from a wire-style options mapping

        Recognised keys: ``instrument`` ({url, symbol} mapping or
        InstrumentReference), ``quantity``, ``bid_price``, ``stop_price``,
        ``time``, ``trigger``, ``type``. Falsy optional values fall back to
        the defaults.
        """
        instrument = options["instrument"]
        if not isinstance(instrument, InstrumentReference):
            instrument = InstrumentReference(
                url=instrument["url"], symbol=instrument["symbol"]
            )

        return cls(
            instrument=instrument,
            quantity=options["quantity"],
            bid_price=options.get("bid_price"),
            stop_price=options.get("stop_price"),
            time_in_force=options.get("time") or "gfd",
            trigger=options.get("trigger") or "immediate",
            order_type=options.get("type") or "market",
        )

    def with_side(self, side: OrderSide) -> "OrderSpecification":
        return replace(self, side=side)

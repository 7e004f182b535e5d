"""Per-symbol position bookkeeping from executed fills.

Each symbol is Flat, Long or Short (signed quantity). A fill:
1. On the same side (or from Flat): increases size, avg_price becomes the
   notional-weighted average.
2. On the opposite side: reduces size and realizes
   (fill.price - avg_price) * closed_qty * sign(position). avg_price is
   unchanged while the position stays open.
3. Exactly offsetting: the position is removed (Flat is absent, never a
   zero-quantity record).
4. Over-offsetting: flips to the remainder on the other side at the fill
   price.

The ledger trusts the fills it is given; the daily loss gate is the
caller's job. Not safe for uncoordinated concurrent writers.
"""

import time
from dataclasses import dataclass, replace
from decimal import Decimal
from uuid import uuid4

from trader.exceptions import FlatPositionError, InvalidFillError
from trader.logging import get_logger
from trader.models import Fill, OrderSide, Position

logger = get_logger(__name__)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class FillResult:
    """Outcome of applying one fill.

    ``position`` is None when the symbol ended Flat.
    """

    fill: Fill
    position: Position | None
    realized_pnl: Decimal


def _validate(fill: Fill) -> None:
    if not fill.symbol:
        raise InvalidFillError(f"Fill {fill.id!r} has an empty symbol")
    if fill.quantity <= _ZERO:
        raise InvalidFillError(f"Fill {fill.id!r} quantity must be positive, got {fill.quantity}")
    if fill.price <= _ZERO:
        raise InvalidFillError(f"Fill {fill.id!r} price must be positive, got {fill.price}")


class PositionLedger:
    """Applies fills to positions and keeps an append-only fill history."""

    def __init__(self) -> None:
        self._positions: dict[str, Position] = {}
        self._fills: list[Fill] = []
        self._realized_total = _ZERO

    @property
    def realized_total(self) -> Decimal:
        """Cumulative realized P&L across all fills applied."""
        return self._realized_total

    @property
    def fill_count(self) -> int:
        return len(self._fills)

    def position(self, symbol: str) -> Position | None:
        """Current position for a symbol, or None when Flat."""
        current = self._positions.get(symbol)
        return replace(current) if current is not None else None

    def positions(self) -> list[Position]:
        """All open positions."""
        return [replace(p) for p in self._positions.values()]

    def apply(self, fill: Fill) -> FillResult:
        """Apply a fill to its symbol's position.

        Args:
            fill: Executed fill with positive quantity and price.

        Returns:
            FillResult with the resulting position and realized P&L.

        Raises:
            InvalidFillError: If quantity or price is non-positive or the
                symbol is empty.
        """
        _validate(fill)

        signed = fill.quantity if fill.side is OrderSide.BUY else -fill.quantity
        current = self._positions.get(fill.symbol)
        realized = _ZERO

        if current is None:
            updated: Position | None = Position(fill.symbol, signed, fill.price)
        elif (current.quantity > 0) == (signed > 0):
            size = abs(current.quantity)
            avg_price = (size * current.avg_price + fill.quantity * fill.price) / (size + fill.quantity)
            updated = Position(fill.symbol, current.quantity + signed, avg_price)
        else:
            direction = Decimal(1) if current.quantity > 0 else Decimal(-1)
            closed = min(abs(current.quantity), fill.quantity)
            realized = (fill.price - current.avg_price) * closed * direction
            remaining = current.quantity + signed
            if remaining == _ZERO:
                updated = None
            elif (remaining > 0) == (current.quantity > 0):
                updated = Position(fill.symbol, remaining, current.avg_price)
            else:
                updated = Position(fill.symbol, remaining, fill.price)

        if updated is None:
            self._positions.pop(fill.symbol, None)
        else:
            self._positions[fill.symbol] = updated

        self._fills.append(fill)
        self._realized_total += realized

        logger.info(
            "fill_applied",
            fill_id=fill.id,
            symbol=fill.symbol,
            side=fill.side.value,
            quantity=str(fill.quantity),
            price=str(fill.price),
            realized_pnl=str(realized),
            position_qty=str(updated.quantity) if updated else "0",
        )

        return FillResult(
            fill=fill,
            position=replace(updated) if updated is not None else None,
            realized_pnl=realized,
        )

    def close_position(
        self,
        symbol: str,
        price: Decimal,
        fill_id: str | None = None,
        timestamp: float | None = None,
    ) -> FillResult:
        """Flatten a symbol with an offsetting fill at the given price.

        Raises:
            FlatPositionError: If the symbol has no open position.
        """
        current = self._positions.get(symbol)
        if current is None:
            raise FlatPositionError(f"No open position for {symbol}")

        fill = Fill(
            id=fill_id or str(uuid4()),
            symbol=symbol,
            side=OrderSide.SELL if current.quantity > 0 else OrderSide.BUY,
            quantity=abs(current.quantity),
            price=price,
            timestamp=timestamp if timestamp is not None else time.time(),
        )
        return self.apply(fill)

    def fetch(self, offset: int = 0, limit: int = 50) -> list[Fill]:
        """Page through fill history, newest first.

        Returns:
            Up to ``limit`` fills starting ``offset`` from the newest.
            Empty for a negative or out-of-range offset or a limit <= 0.
        """
        if offset < 0 or limit <= 0 or offset >= len(self._fills):
            return []
        end = len(self._fills) - offset
        start = max(0, end - limit)
        return self._fills[start:end][::-1]

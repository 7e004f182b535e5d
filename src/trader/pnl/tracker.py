"""Point-in-time P&L view.

equity = base_equity + unrealized. Realized P&L is assumed already folded
into base_equity by the caller; realized_today is kept separately for
display and reset by the caller on day rollover.
"""

import time
from collections.abc import Callable
from decimal import Decimal

from trader.logging import get_logger
from trader.models import PnLSnapshot, Position
from trader.risk.manager import to_decimal

logger = get_logger(__name__)


class PnLTracker:
    """Tracks realized-today P&L and builds snapshots.

    Args:
        clock: Returns the current Unix time for snapshot timestamps.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._realized_today = Decimal("0")

    @property
    def realized_today(self) -> Decimal:
        return self._realized_today

    def add_realized(self, amount: Decimal | float) -> None:
        """Accumulate realized P&L (gains and losses both apply)."""
        self._realized_today += to_decimal(amount)

    def reset_day(self) -> None:
        logger.info("pnl_day_reset", realized_today=str(self._realized_today))
        self._realized_today = Decimal("0")

    def unrealized(self, mark_price: Decimal | float, position: Position | None) -> Decimal:
        """Mark-to-market P&L on the open position, 0 when Flat."""
        if position is None or position.is_flat:
            return Decimal("0")
        return (to_decimal(mark_price) - position.avg_price) * position.quantity

    def snapshot(
        self,
        mark_price: Decimal | float,
        position: Position | None,
        base_equity: Decimal | float,
    ) -> PnLSnapshot:
        """Build a snapshot at the given mark price.

        Args:
            mark_price: Latest price of the position's symbol.
            position: Open position, or None when Flat.
            base_equity: Equity including all realized P&L.

        Returns:
            PnLSnapshot with equity = base_equity + unrealized.
        """
        unrealized = self.unrealized(mark_price, position)
        return PnLSnapshot(
            timestamp=self._clock(),
            equity=to_decimal(base_equity) + unrealized,
            realized_today=self._realized_today,
            unrealized=unrealized,
        )

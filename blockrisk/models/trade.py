"""
Trade Data Model for blockrisk

Read-only view of a closed options trade as exported by the trade log.
The Monte Carlo engine only reads these records; it never mutates them.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional, Union


UNKNOWN_STRATEGY = "Unknown"


@dataclass(frozen=True)
class Trade:
    """A single closed trade"""
    date_opened: Union[datetime, date]
    pl: float
    num_contracts: int = 1
    funds_at_close: float = 0.0
    margin_req: Optional[float] = None
    max_loss: Optional[float] = None
    max_profit: Optional[float] = None
    strategy: Optional[str] = None
    date_closed: Optional[datetime] = None

    @property
    def opened_at(self) -> datetime:
        """Open timestamp as a datetime (plain dates open at midnight)."""
        if isinstance(self.date_opened, datetime):
            return self.date_opened
        return datetime.combine(self.date_opened, time.min)

    @property
    def trading_day(self) -> str:
        """ISO calendar date of the open, in UTC for timezone-aware timestamps."""
        opened = self.opened_at
        if opened.tzinfo is not None:
            opened = opened.astimezone(timezone.utc)
        return opened.date().isoformat()

    @property
    def strategy_name(self) -> str:
        return self.strategy or UNKNOWN_STRATEGY

    @property
    def capital_before_trade(self) -> float:
        """Account capital just before this trade, from funds after it closed."""
        return self.funds_at_close - self.pl

"""Data models for the paper-trading simulator.

The session controller, async runner, and CLI all import from models.
"""

from models.config import AccountConfig, FeedConfig, ScheduledOrder, SimulationConfig
from models.log import RejectedOrderLog, SessionLog
from models.portfolio import PortfolioSnapshot, Position, PricePoint
from models.trade import OrderResult, RejectionReason, Side, TradeRecord

__all__ = [
    # config
    "AccountConfig",
    "FeedConfig",
    "ScheduledOrder",
    "SimulationConfig",
    # log
    "RejectedOrderLog",
    "SessionLog",
    # portfolio
    "PortfolioSnapshot",
    "Position",
    "PricePoint",
    # trade
    "OrderResult",
    "RejectionReason",
    "Side",
    "TradeRecord",
]

"""View models for service outputs."""

from fxfolio.domain.views.conversion import (
    ConversionError,
    BatchConversionResult,
    ConvertedTotal,
)
from fxfolio.domain.views.portfolio import (
    Quote,
    PositionMetrics,
    MetricsRefreshResult,
    PerformerView,
    PortfolioSummary,
)

__all__ = [
    "ConversionError",
    "BatchConversionResult",
    "ConvertedTotal",
    "Quote",
    "PositionMetrics",
    "MetricsRefreshResult",
    "PerformerView",
    "PortfolioSummary",
]

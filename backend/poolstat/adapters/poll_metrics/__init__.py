"""Poll metrics adapters."""

from poolstat.adapters.poll_metrics.fake import FakePollMetrics
from poolstat.adapters.poll_metrics.prometheus import PrometheusPollMetrics

__all__ = ["PrometheusPollMetrics", "FakePollMetrics"]

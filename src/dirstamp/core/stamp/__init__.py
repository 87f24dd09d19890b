"""Directory mtime synchronization.

Sets every directory's mtime to its newest immediate child, deepest
directories first, so freshness propagates up to the root.

Usage:
    from dirstamp.core.config import StampConfig
    from dirstamp.core.stamp import StampService

    service = StampService(StampConfig(confirm=True))
    summary = service.run(Path("~/photos").expanduser())
"""

from dirstamp.core.stamp.service import StampService
from dirstamp.core.stamp.types import StampSummary, TimestampDecision

__all__ = ["StampService", "StampSummary", "TimestampDecision"]

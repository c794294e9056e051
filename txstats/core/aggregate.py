"""
Running Aggregate

Maintains sum, count, min and max incrementally.

DESIGN DECISION: Each update is O(1) and looks only at the current
aggregate plus the new amount. History is never rescanned.

The average is NOT maintained. It is derived from sum / count at
snapshot time so floating-point error does not compound.
"""

from typing import Optional

from txstats.models.transaction import Statistics


class RunningAggregate:
    """
    Incremental {sum, count, min, max} over admitted amounts.

    With count == 0 the other fields are zero and meaningless;
    snapshot() reports that as "no data" rather than zeros.
    """

    def __init__(self):
        self.sum: float = 0.0
        self.count: int = 0
        self.min: float = 0.0
        self.max: float = 0.0

    def update(self, amount: float) -> None:
        self.sum += amount
        self.count += 1
        if self.count == 1 or amount > self.max:
            self.max = amount
        if self.count == 1 or amount < self.min:
            self.min = amount

    def reset(self) -> None:
        self.sum = 0.0
        self.count = 0
        self.min = 0.0
        self.max = 0.0

    def snapshot(self) -> Optional[Statistics]:
        """
        Current statistics, or None when nothing has been admitted.
        """
        if self.count == 0:
            return None
        return Statistics(
            sum=self.sum,
            average=self.sum / self.count,
            max=self.max,
            min=self.min,
            count=self.count,
        )

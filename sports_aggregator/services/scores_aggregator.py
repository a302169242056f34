"""Score aggregation across all configured score providers."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..models import ScoreEvent, SportId
from .aggregator import BaseAggregator
from .fallback_data import sample_scores

logger = logging.getLogger(__name__)


@dataclass
class Scoreboard:
    date: date
    scores: List[ScoreEvent]


class ScoresAggregator(BaseAggregator[ScoreEvent]):
    """Deduplicates by event id, latest start first, cached for one minute by default."""

    kind = "scores"

    def sample_data(self) -> List[ScoreEvent]:
        return sample_scores(self._clock())

    async def get_scoreboard(
        self,
        sport: Optional[SportId] = None,
        day: Optional[date] = None,
        limit: int = 100,
    ) -> Scoreboard:
        """
        Scores of the events starting on ``day`` (UTC), at most ``limit``.

        Always reads live data. The date filter runs before truncation, so a
        busy feed on other days cannot push the requested day out. Without
        ``day`` the full current list is returned under today's date.
        """
        if day is None:
            result = await self.get_latest(sport, limit=limit, use_cache=False)
            return Scoreboard(date=self._clock().date(), scores=result.items)

        def starts_on_day(score: ScoreEvent) -> bool:
            return score.start_time.date() == day

        try:
            pool = await self.fetch_pool(sport, limit)
            if self.merge(pool, sport, 1):
                return Scoreboard(date=day, scores=self.merge(pool, sport, limit, predicate=starts_on_day))
        except Exception as e:
            logger.exception(f"Unexpected error building scoreboard for {day}: {e}")

        fallback = self._fallback(sport, limit, reason="no provider returned usable items")
        return Scoreboard(date=day, scores=[score for score in fallback.items if starts_on_day(score)])

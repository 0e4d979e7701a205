"""Configuration utilities.

Environment driven settings for the ranking pipeline. Scoring weights and
thresholds are product constants and deliberately not configurable here.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()


@dataclass(slots=True)
class Settings:
    max_workers: int = int(os.getenv("RANKING_MAX_WORKERS", "8"))
    # Below this many flights scoring runs inline instead of on a pool
    parallel_threshold: int = int(os.getenv("RANKING_PARALLEL_THRESHOLD", "4"))
    suggestion_limit: int = int(os.getenv("RANKING_SUGGESTION_LIMIT", "5"))
    log_level: str = os.getenv("RANKING_LOG_LEVEL", "INFO")

    def workers_for(self, flight_count: int) -> int:
        """Pool size bounded by both the setting and the candidate set size."""
        return max(1, min(self.max_workers, flight_count))


settings = Settings()

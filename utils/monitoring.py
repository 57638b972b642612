"""
Monitoring and metrics for the legal intake assistant.
"""
import logging
import time
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

class ConversationMonitor:
    """Track how turns are parsed and how lawyer searches resolve."""

    def __init__(self):
        """Initialize the monitoring system."""
        logger.info("Initializing conversation monitor")
        self.turns_processed = 0
        self.error_count = 0
        self.search_ready_count = 0
        self.parse_source_distribution = {"ai": 0, "fallback": 0, "none": 0}
        self.avg_turn_time = 0

        # Search metrics
        self.searches_run = 0
        self.empty_searches = 0
        self.search_tier_distribution = {}
        self.hourly_turn_count = {}

    def log_turn(self, result: Dict[str, Any], execution_time: float, error: Optional[str] = None):
        """
        Record one processed utterance.

        Args:
            result: ProcessResult as a dictionary
            execution_time: Time taken for the turn in seconds
            error: Error message if the pipeline failed
        """
        self.turns_processed += 1

        if error:
            self.error_count += 1

        source = result.get("parse_source") or "none"
        self.parse_source_distribution[source] = self.parse_source_distribution.get(source, 0) + 1

        if result.get("should_search"):
            self.search_ready_count += 1

        self.avg_turn_time = (
            (self.avg_turn_time * (self.turns_processed - 1) + execution_time) /
            self.turns_processed
        )

        current_hour = time.strftime("%Y-%m-%d-%H")
        self.hourly_turn_count[current_hour] = self.hourly_turn_count.get(current_hour, 0) + 1

        logger.debug(f"Logged turn metrics: source={source}, time={execution_time:.2f}s")

    def log_search(self, tier: Optional[str], result_count: int):
        """
        Record one lawyer search.

        Args:
            tier: Name of the tier that produced results, None if all were empty
            result_count: Number of lawyers returned
        """
        self.searches_run += 1
        if not result_count:
            self.empty_searches += 1
        key = tier or "exhausted"
        self.search_tier_distribution[key] = self.search_tier_distribution.get(key, 0) + 1

    def get_system_health(self) -> Dict[str, Any]:
        """
        Get system health metrics.

        Returns:
            Dictionary of health metrics
        """
        return {
            "turns_processed": self.turns_processed,
            "error_rate": self.error_count / max(1, self.turns_processed),
            "fallback_rate": self.parse_source_distribution.get("fallback", 0) / max(1, self.turns_processed),
            "avg_turn_time": self.avg_turn_time,
            "searches_run": self.searches_run,
            "empty_search_rate": self.empty_searches / max(1, self.searches_run),
        }

    def get_performance_report(self) -> Dict[str, Any]:
        """
        Generate a performance report.

        Returns:
            Dictionary with performance metrics
        """
        return {
            "summary": self.get_system_health(),
            "parse_sources": {
                source: {
                    "turn_count": count,
                    "percentage": (count / max(1, self.turns_processed)) * 100
                }
                for source, count in self.parse_source_distribution.items()
            },
            "search": {
                "ready_turns": self.search_ready_count,
                "by_tier": self.search_tier_distribution,
            },
            "hourly_distribution": self.hourly_turn_count
        }

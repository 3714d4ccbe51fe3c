"""
Configuration for the timetable solver
"""
import logging
import os
from dataclasses import dataclass, field


@dataclass
class ScoringWeights:
    """Soft constraint weights, lower total score is better"""

    qualified_instructor_bonus: int = -50
    preferred_instructor_bonus: int = -30
    time_priority_penalty: int = 10  # per priority level
    distance_penalty: int = 5  # per unit of room distance
    clustering_penalty: int = 15  # per same-day session of the section
    gap_penalty: int = 3  # per hour of gap
    gap_threshold_minutes: int = 60

    # Room distance units
    unknown_building_distance: int = 1
    other_building_distance: int = 10


@dataclass
class SolverConfig:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    enable_logging: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "SolverConfig":
        enabled = os.environ.get("TIMETABLE_ENABLE_LOGGING", "1").lower()
        return cls(
            enable_logging=enabled not in ("0", "false", "no"),
            log_level=os.environ.get("TIMETABLE_LOG_LEVEL", "INFO").upper(),
        )


config = SolverConfig.from_env()


def apply_logging(cfg: SolverConfig):
    """Set the timetable logger level from a config; disabled means silent"""
    root = logging.getLogger("timetable")
    if cfg.enable_logging:
        root.setLevel(getattr(logging, cfg.log_level.upper(), logging.INFO))
    else:
        root.setLevel(logging.CRITICAL + 1)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the timetable namespace"""
    root = logging.getLogger("timetable")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        root.addHandler(handler)
        apply_logging(config)
    return logging.getLogger(f"timetable.{name}")

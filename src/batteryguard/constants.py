from typing import Final

# Self-discharge guards
MIN_DECAY_INTERVAL_DAYS: Final = 0.04  # ~1 hour
MIN_DECAY_DROP: Final = 0.1  # percentage points
DEFAULT_DECAY_RATE: Final = 0.1  # LiIon rate, used for unknown chemistries

# Health estimation
CYCLE_WEAR_PER_CYCLE: Final = 0.05
RESISTANCE_PENALTY_THRESHOLD_MOHM: Final = 50
RESISTANCE_PENALTY_PER_MOHM: Final = 0.2

# View thresholds
LOW_CHARGE_THRESHOLD: Final = 20
HIGH_CYCLE_THRESHOLD: Final = 60
STALE_AFTER_DAYS: Final = 90

# Storage keys, one JSON blob per collection
BATTERIES_KEY: Final = "batteries_v1"
LOGS_KEY: Final = "battery_logs_v1"

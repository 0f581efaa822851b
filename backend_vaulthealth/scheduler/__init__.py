# Weak-password report scheduling: debounce, single-flight, cycle outcomes.

from backend_vaulthealth.scheduler.engine import (
    CYCLE_DISCARDED,
    CYCLE_FAILED,
    CYCLE_SENT,
    CycleOutcome,
    SchedulerConfig,
    UserSwitchPolicy,
    WeakPasswordReportScheduler,
)

__all__ = [
    "CYCLE_DISCARDED",
    "CYCLE_FAILED",
    "CYCLE_SENT",
    "CycleOutcome",
    "SchedulerConfig",
    "UserSwitchPolicy",
    "WeakPasswordReportScheduler",
]

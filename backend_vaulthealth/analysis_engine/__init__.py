"""
Analysis engine: credential classification and weak-password report aggregation.
"""

from backend_vaulthealth.analysis_engine.classifier import (
    WEAK_SCORE_MAX,
    derive_user_inputs,
    is_scorable,
    is_weak,
)
from backend_vaulthealth.analysis_engine.report import WeakPasswordReport, generate_report

__all__ = [
    "WEAK_SCORE_MAX",
    "WeakPasswordReport",
    "derive_user_inputs",
    "generate_report",
    "is_scorable",
    "is_weak",
]

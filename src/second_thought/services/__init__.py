"""Stateful services: cool-downs, profiles, analysis, evaluation, tracking."""
from second_thought.services.analysis import AnalysisService
from second_thought.services.cooldown_manager import (COOLDOWN_DURATION,
                                                      CoolDownManager)
from second_thought.services.evaluation import EvaluationScorer
from second_thought.services.tracking import TrackingService
from second_thought.services.user_profiles import UserProfileManager

__all__ = [
    "AnalysisService",
    "COOLDOWN_DURATION",
    "CoolDownManager",
    "EvaluationScorer",
    "TrackingService",
    "UserProfileManager",
]

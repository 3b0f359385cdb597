"""
Patch engine: applies externally produced change plans to source files.
"""

from .formatter import PrettierFormatter
from .models import Change, ChangePlan, PlanStep
from .patch_engine import PatchEngine, apply_plan, load_plan, normalize_code, replace_exact, MatchStatus

__all__ = [
    'PrettierFormatter',
    'Change',
    'ChangePlan',
    'PlanStep',
    'PatchEngine',
    'apply_plan',
    'load_plan',
    'normalize_code',
    'replace_exact',
    'MatchStatus',
]

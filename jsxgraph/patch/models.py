"""
Change plan models supplied by the external reasoning agent.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class Change(BaseModel):
    """Replace the first verbatim occurrence of `old` with `new`.

    Either side may be missing or null; such a change is skipped on its own
    when the step runs. An empty `new` deletes `old`.
    """
    old: Optional[str] = None
    new: Optional[str] = None


class PlanStep(BaseModel):
    """All changes targeting one file."""
    file: str
    action: str = "modify"
    reason: Optional[str] = None
    changes: List[Change] = Field(default_factory=list)


class ChangePlan(BaseModel):
    """Ordered list of file-scoped edits."""
    plan: List[PlanStep]
    confidence: Optional[float] = None
    explanation: Optional[str] = None

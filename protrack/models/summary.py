"""Summarizer request and response models."""

from typing import List
from pydantic import Field

from .base import CamelModel


class ProjectFacts(CamelModel):
    """Project facts handed to the summarizer."""
    project_name: str
    description: str = ""
    team_members: List[str] = Field(default_factory=list)
    start_date: str
    deadline: str
    current_status: str


class TaskFact(CamelModel):
    name: str
    description: str = ""
    status: str


class ProjectSummary(CamelModel):
    """Executive summary, risks and suggestions for one project."""
    executive_summary: str
    risk_assessment: str
    actionable_suggestions: str


class ActionableSuggestions(CamelModel):
    risk_assessment: str
    bottleneck_analysis: str
    suggestions: List[str] = Field(default_factory=list)
    executive_summary: str


class RiskAssessment(CamelModel):
    risk_assessment: str
    bottleneck_analysis: str

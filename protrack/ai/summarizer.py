"""
AI project summarizer.

Sends project facts to an OpenAI-compatible chat endpoint (DeepSeek by
default) in JSON mode and validates the reply against the response models.
Calls are made once: a failure surfaces to the caller, who decides whether
to ask again.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from config import settings
from ..models import ActionableSuggestions, ProjectFacts, ProjectSummary, RiskAssessment, TaskFact
from .prompts import PromptTemplates

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class SummarizerError(Exception):
    """The summarizer call failed or returned something unusable."""
    pass


class ProjectSummarizer:
    """Client for project summaries and suggestions."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self.client = client or AsyncOpenAI(
            api_key=settings.deepseek_api_key,
            base_url=settings.deepseek_base_url,
            timeout=settings.summarizer_timeout_seconds,
            max_retries=0,
        )
        self.model = model or settings.deepseek_model
        self.prompts = PromptTemplates()

    async def _call_api(
        self,
        prompt: str,
        temperature: float = 0.5,
        max_tokens: int = 1500,
    ) -> str:
        """Make one JSON-mode chat completion call."""
        messages = [
            {"role": "system", "content": self.prompts.SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            logger.error(f"Summarizer API error: {e}")
            raise SummarizerError("The AI service could not be reached.") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise SummarizerError("The AI service returned an empty response.")
        return content

    @staticmethod
    def _parse(content: str, model: Type[ResponseT]) -> ResponseT:
        try:
            data: Dict[str, Any] = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse summarizer response: {content[:200]}")
            raise SummarizerError("The AI service returned invalid JSON.") from e

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Summarizer response missing fields for {model.__name__}: {e}")
            raise SummarizerError("The AI service returned an incomplete answer.") from e

    async def generate_project_summary(self, facts: ProjectFacts, tasks: List[TaskFact]) -> ProjectSummary:
        """
        Executive summary, risk assessment and suggestions for a project.

        Args:
            facts: Project name, description, team, dates and status
            tasks: The project's tasks (name, description, status)

        Returns:
            ProjectSummary

        Raises:
            SummarizerError: on transport failure or an unusable reply
        """
        logger.info(f"Generating summary for project '{facts.project_name}' ({len(tasks)} tasks)")
        content = await self._call_api(self.prompts.project_summary_prompt(facts, tasks), temperature=0.5)
        return self._parse(content, ProjectSummary)

    async def provide_actionable_suggestions(self, facts: ProjectFacts) -> ActionableSuggestions:
        """Risk, bottleneck analysis and a list of suggestions, from facts alone."""
        logger.info(f"Requesting suggestions for project '{facts.project_name}'")
        content = await self._call_api(self.prompts.actionable_suggestions_prompt(facts), temperature=0.7)
        return self._parse(content, ActionableSuggestions)

    async def assess_risks(self, facts: ProjectFacts, tasks: List[TaskFact]) -> RiskAssessment:
        logger.info(f"Assessing risks for project '{facts.project_name}'")
        content = await self._call_api(
            self.prompts.risk_assessment_prompt(facts, tasks),
            temperature=0.3,
            max_tokens=800,
        )
        return self._parse(content, RiskAssessment)


_summarizer: Optional[ProjectSummarizer] = None


def get_summarizer() -> ProjectSummarizer:
    """Get the process-wide summarizer."""
    global _summarizer
    if _summarizer is None:
        _summarizer = ProjectSummarizer()
    return _summarizer

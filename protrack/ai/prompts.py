"""Prompt templates for project summaries."""

import json
from typing import List

from ..models import ProjectFacts, TaskFact


class PromptTemplates:
    """Collection of prompt templates for the project summarizer."""

    SYSTEM_PROMPT = """You are an AI assistant for project managers.
You read a project's facts and tasks and give a short, practical assessment.

IMPORTANT GUIDELINES:
- Be concise and professional
- Base every statement on the facts given; do not invent team members or dates
- Suggestions must be specific and actionable
- Always answer with a single JSON object using exactly the keys requested"""

    @staticmethod
    def _facts_block(facts: ProjectFacts) -> str:
        team = ", ".join(facts.team_members) if facts.team_members else "None assigned"
        return f"""Project Name: {facts.project_name}
Description: {facts.description or "No description"}
Team Members: {team}
Start Date: {facts.start_date}
Deadline: {facts.deadline}
Current Status: {facts.current_status}"""

    @staticmethod
    def tasks_json(tasks: List[TaskFact]) -> str:
        """Tasks as the JSON list the summary prompt embeds."""
        return json.dumps([t.model_dump() for t in tasks])

    @classmethod
    def project_summary_prompt(cls, facts: ProjectFacts, tasks: List[TaskFact]) -> str:
        """Executive summary, risks and suggestions, informed by the task list."""
        return f"""Provide an executive summary of this project, assess potential risks and bottlenecks,
and offer actionable suggestions to improve project outcomes.

{cls._facts_block(facts)}
Tasks: {cls.tasks_json(tasks)}

Analyze all the information above, including the tasks, to inform your response.

Respond with JSON:
{{
    "executive_summary": "A concise summary of the project status and objectives",
    "risk_assessment": "Potential risks, bottlenecks and challenges",
    "actionable_suggestions": "Specific, practical suggestions to mitigate risks and improve progress"
}}"""

    @classmethod
    def actionable_suggestions_prompt(cls, facts: ProjectFacts) -> str:
        """Risks, bottlenecks and a list of suggestions from the project facts alone."""
        return f"""Analyze the project information provided and offer actionable suggestions for improvement.

{cls._facts_block(facts)}

Provide the following:
1. Risk Assessment: potential risks that could impact the project
2. Bottleneck Analysis: potential bottlenecks in the project workflow
3. Suggestions: specific, actionable suggestions to improve project outcomes
4. Executive Summary: a concise summary of the project status and your recommendations

Respond with JSON:
{{
    "risk_assessment": "...",
    "bottleneck_analysis": "...",
    "suggestions": ["...", "..."],
    "executive_summary": "..."
}}"""

    @classmethod
    def risk_assessment_prompt(cls, facts: ProjectFacts, tasks: List[TaskFact]) -> str:
        """Short risk and bottleneck check."""
        return f"""Assess the delivery risk of this project. Focus on blocked or unstarted work and the time left.

{cls._facts_block(facts)}
Tasks: {cls.tasks_json(tasks)}

Respond with JSON:
{{
    "risk_assessment": "Main risks to the deadline, most serious first",
    "bottleneck_analysis": "Where work is piling up or waiting"
}}"""

from .prompts import PromptTemplates
from .summarizer import ProjectSummarizer, SummarizerError, get_summarizer

__all__ = [
    "PromptTemplates",
    "ProjectSummarizer",
    "SummarizerError",
    "get_summarizer",
]

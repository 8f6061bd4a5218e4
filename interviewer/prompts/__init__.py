"""
AI prompt templates for the AI Interviewer

Contains structured prompts for:
- Question generation
- Answer evaluation
- Interview summary
"""

from interviewer.prompts.interviewer import InterviewerPrompts
from interviewer.prompts.evaluator import EvaluatorPrompts

__all__ = [
    "InterviewerPrompts",
    "EvaluatorPrompts",
]

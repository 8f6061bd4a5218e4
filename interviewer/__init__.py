"""
AI Interviewer - simulated job interview backend

Generates interview questions from a resume, scores free-text answers
and produces a final assessment, failing over across several AI
provider keys and degrading to local content when none can answer.
"""

__version__ = "0.1.0"

"""
API endpoint modules for the AI Interviewer
"""

from interviewer.api.endpoints import interview, providers

__all__ = ["interview", "providers"]

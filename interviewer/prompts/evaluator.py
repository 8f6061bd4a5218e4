"""
AI Evaluator Prompt Templates

Contains the prompt for scoring a single answer.

Evaluation criteria (25% each):
- Relevance to the question
- Clarity and communication
- Depth and specificity
- Professional presentation
"""


class EvaluatorPrompts:
    """Prompt templates for AI evaluation of answers."""

    SYSTEM_CONTEXT = """You are an experienced HR interviewer evaluating a candidate's answer.

Be constructive and encouraging while providing honest feedback.
"""

    SCORING_CRITERIA = """
=== CRITERIA FOR EVALUATION ===
- Relevance to the question (25%)
- Clarity and communication (25%)
- Depth and specificity (25%)
- Professional presentation (25%)
"""

    def evaluate_answer_prompt(self, question: str, answer: str, resume: str) -> str:
        """Prompt for evaluating one answer against its question."""
        return f"""{self.SYSTEM_CONTEXT}
=== QUESTION ASKED ===
"{question}"

=== CANDIDATE'S ANSWER ===
"{answer}"

=== CANDIDATE'S BACKGROUND ===
{resume}
{self.SCORING_CRITERIA}
=== OUTPUT FORMAT ===
Respond with a single JSON object only:
{{
  "score": <integer from 1 to 10>,
  "feedback": "<constructive feedback highlighting strengths and areas for improvement>",
  "idealAnswer": "<a brief example of what a strong answer might include>"
}}
"""

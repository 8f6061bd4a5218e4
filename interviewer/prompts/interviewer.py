"""
AI Interviewer Prompt Templates

Contains structured prompts for:
- Opening question generation from a resume
- Follow-up question generation
- End-of-interview summary
"""

from interviewer.models.interview import InterviewSession


class InterviewerPrompts:
    """
    Prompt templates for the AI interviewer.

    Key principles:
    - Professional but personable tone
    - Questions grounded in the candidate's background
    - One question at a time, no repeated topics
    """

    SYSTEM_CONTEXT = """You are an experienced HR interviewer conducting a professional job interview.

Your role:
- Ask relevant questions based on the candidate's background
- Explore technical skills, experience and behaviour
- Keep a neutral, encouraging, professional tone
"""

    def generate_questions_prompt(self, resume: str, count: int = 3) -> str:
        """Prompt for the opening questions of an interview."""
        return f"""{self.SYSTEM_CONTEXT}
=== CANDIDATE RESUME / BACKGROUND ===
{resume}

=== TASK ===
Generate {count} thoughtful interview questions appropriate for this candidate.
The questions should be professional, relevant to their background, and cover
different aspects (technical skills, experience, behavioral).

=== OUTPUT FORMAT ===
Respond with a JSON array of strings only, for example:
["Question 1 here", "Question 2 here", "Question 3 here"]
"""

    def next_question_prompt(self, session: InterviewSession) -> str:
        """Prompt for the next question given the conversation so far."""
        return f"""{self.SYSTEM_CONTEXT}
=== CANDIDATE RESUME / BACKGROUND ===
{session.resume}

=== CONVERSATION SO FAR ===
{self._format_transcript(session)}

=== TASK ===
Generate 1 follow-up interview question that:
1. Builds naturally on the conversation so far
2. Explores a different aspect of their experience or skills
3. Is professional and engaging
4. Avoids repeating previous topics

Return only the question text, nothing else.
"""

    def summary_prompt(self, session: InterviewSession, average_score: float) -> str:
        """Prompt for the overall assessment once the candidate ends the interview."""
        answered = "\n\n".join(
            f"Q{i}: {a.question}\nAnswer: {a.answer}\nScore: {a.evaluation.score}/10"
            for i, a in enumerate(session.answers, start=1)
        )
        return f"""Interview session ended. Here's the summary:

Total Questions Answered: {len(session.answers)}
Average Score: {average_score:.1f}/10

Individual Answers and Scores:
{answered}

Based on this interview performance, provide a brief overall assessment (2-3 sentences)
highlighting the candidate's key strengths and thanking them for their time.
"""

    @staticmethod
    def _format_transcript(session: InterviewSession) -> str:
        if not session.answers:
            return "No questions answered yet."
        return "\n\n".join(
            f"Q{i}: {a.question}\nA{i}: {a.answer}"
            for i, a in enumerate(session.answers, start=1)
        )

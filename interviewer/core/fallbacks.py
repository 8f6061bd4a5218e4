"""
Fallback content used when no AI provider can answer.

Everything here is local and deterministic apart from the small
random step when picking a follow-up question.
"""

import random

from interviewer.models.evaluation import Evaluation, MAX_SCORE

OPENING_QUESTIONS = [
    "Can you tell me about yourself and your professional background?",
    "What interests you most about this position?",
    "Describe a challenging project you've worked on recently.",
]

# Roughly ordered from warm-up to more probing questions
FOLLOW_UP_QUESTIONS = [
    "Can you share an example of a time when you had to solve a complex problem?",
    "How do you typically approach learning new skills or technologies?",
    "Tell me about a time when you had to work with a difficult team member.",
    "What motivates you in your professional work?",
    "Describe a situation where you had to adapt to significant changes.",
    "How do you prioritize when several important tasks compete for your time?",
    "Tell me about a decision you later realized was a mistake. What did you learn from it?",
    "Describe the project you are proudest of and the impact it had.",
    "Where do you see your career heading in the next few years, and how does this role fit in?",
]

PROBLEM_SOLVING_KEYWORDS = (
    "problem",
    "solve",
    "solution",
    "challenge",
    "experience",
    "project",
    "team",
    "result",
    "learned",
    "example",
)

FALLBACK_BASE_SCORE = 6

NO_ANSWERS_FEEDBACK = "Thank you for your time! Have a great day!"


def opening_questions(count: int = 3) -> list[str]:
    return OPENING_QUESTIONS[:max(1, count)]


def follow_up_question(
    progress: int,
    asked: list[str],
    rng: random.Random | None = None,
) -> str:
    """
    Pick a follow-up question for the given number of answered questions.

    Looks at the entry matching the progress and the one after it,
    prefers those not yet asked, and picks one at random.
    """
    rng = rng or random
    start = max(0, progress - 1) % len(FOLLOW_UP_QUESTIONS)
    window = [
        FOLLOW_UP_QUESTIONS[(start + offset) % len(FOLLOW_UP_QUESTIONS)]
        for offset in range(2)
    ]
    fresh = [q for q in window if q not in asked]
    if not fresh:
        fresh = [q for q in FOLLOW_UP_QUESTIONS if q not in asked] or window
    return rng.choice(fresh)


def heuristic_evaluation(answer: str) -> Evaluation:
    """
    Score an answer without AI.

    Base score of 6, +1 for problem-solving or experience language,
    +1 past 100 characters, +1 past 200 characters.
    """
    text = answer.strip()
    lowered = text.lower()
    score = FALLBACK_BASE_SCORE

    mentions_experience = any(keyword in lowered for keyword in PROBLEM_SOLVING_KEYWORDS)
    if mentions_experience:
        score += 1
    if len(text) > 100:
        score += 1
    if len(text) > 200:
        score += 1
    score = min(score, MAX_SCORE)

    if len(text) > 200 and mentions_experience:
        feedback = (
            "Thank you for a detailed answer grounded in your own experience. "
            "You communicated your approach clearly."
        )
    elif len(text) > 100:
        feedback = (
            "Thank you for your thoughtful answer. Adding a concrete example "
            "with a measurable outcome would make it even stronger."
        )
    else:
        feedback = (
            "Thank you for your answer. Try to expand on it with specific "
            "examples from your experience and the results you achieved."
        )

    return Evaluation(
        score=score,
        feedback=feedback,
        ideal_answer=(
            "A strong answer would describe a specific situation, the actions you "
            "took, and the results, showing a clear understanding of the topic."
        ),
    )


def summary_text(answered: int) -> str:
    return (
        f"Thank you for completing {answered} questions with us! You demonstrated good "
        f"communication skills throughout the session. Have a great day!"
    )

import math
from typing import List, Optional, Sequence

from medlearn.core.entities.exercise import AnswerValue, Exercise
from medlearn.core.entities.result import ExerciseResult, QuestionResult


def answer_matches(
    answer: Optional[AnswerValue], correct_answer: Optional[AnswerValue]
) -> bool:
    """
    Strict comparison: an option index never matches its string form and
    an unset answer never matches.
    """
    if answer is None or correct_answer is None:
        return False
    return type(answer) is type(correct_answer) and answer == correct_answer


def answer_at(
    answers: Sequence[Optional[AnswerValue]], index: int
) -> Optional[AnswerValue]:
    return answers[index] if index < len(answers) else None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_score(
    exercise: Exercise, answers: Sequence[Optional[AnswerValue]]
) -> int:
    """
    Weighted percentage of points earned, 0 when the exercise carries no
    points. Answers beyond the question count are ignored.
    """
    total_points = 0
    earned_points = 0
    for index, question in enumerate(exercise.questions):
        total_points += question.points
        if answer_matches(answer_at(answers, index), question.correct_answer):
            earned_points += question.points

    if total_points <= 0:
        return 0
    return round_half_up(earned_points / total_points * 100)


def build_result(
    exercise: Exercise,
    answers: Sequence[Optional[AnswerValue]],
    score: int,
    attempt_number: int,
) -> ExerciseResult:
    questions: List[QuestionResult] = []
    for index, question in enumerate(exercise.questions):
        user_answer = answer_at(answers, index)
        questions.append(
            QuestionResult(
                prompt=question.prompt,
                user_answer=user_answer,
                correct_answer=question.correct_answer,
                is_correct=answer_matches(
                    user_answer, question.correct_answer
                ),
                image=question.image,
                commentary=question.commentary,
                source=question.source,
            )
        )

    return ExerciseResult(
        score=score,
        attempt_number=attempt_number,
        attempts_remaining=exercise.allowed_attempts - attempt_number,
        questions=questions,
    )

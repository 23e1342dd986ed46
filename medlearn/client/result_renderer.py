from dataclasses import dataclass, field
from typing import List, Optional

from medlearn.config import settings
from medlearn.core.entities.exercise import AnswerValue, Exercise
from medlearn.core.entities.result import ExerciseResult
from medlearn.core.enums import ScoreBand

SCORE_BAND_MESSAGES = {
    ScoreBand.EXCELLENT: 'Excellent! You did great!',
    ScoreBand.GOOD: 'Good job! Keep practicing.',
    ScoreBand.RETRY: "Don't give up! Try again.",
}
NOT_ANSWERED = 'Not answered'
UNLIMITED = '∞'


@dataclass
class QuestionFeedback:
    number: int
    prompt: str
    is_correct: bool
    user_answer: str
    correct_answer: str
    image: Optional[str] = None
    commentary: Optional[str] = None
    source: Optional[str] = None


@dataclass
class ResultView:
    score: int
    band: ScoreBand
    message: str
    attempt_number: int
    attempts_remaining: str
    correct_count: int
    question_count: int
    questions: List[QuestionFeedback] = field(default_factory=list)

    @property
    def correct(self) -> List[QuestionFeedback]:
        return [q for q in self.questions if q.is_correct]

    @property
    def incorrect(self) -> List[QuestionFeedback]:
        return [q for q in self.questions if not q.is_correct]


def score_band(score: int) -> ScoreBand:
    if score >= settings.excellent_score_threshold:
        return ScoreBand.EXCELLENT
    if score >= settings.good_score_threshold:
        return ScoreBand.GOOD
    return ScoreBand.RETRY


def format_attempts_remaining(attempts_remaining: int) -> str:
    if attempts_remaining > settings.unlimited_attempts_display_threshold:
        return UNLIMITED
    return str(max(attempts_remaining, 0))


def describe_answer(
    answer: Optional[AnswerValue], options: List[str]
) -> str:
    """Option text for an index answer, the raw value otherwise."""
    if answer is None or answer == '':
        return NOT_ANSWERED
    if isinstance(answer, int) and 0 <= answer < len(options):
        return options[answer]
    return str(answer)


def build_result_view(
    result: ExerciseResult, exercise: Optional[Exercise] = None
) -> ResultView:
    """
    Arranges a server result for display. The exercise, when given, is only
    used to turn option indices back into option text.
    """
    feedback: List[QuestionFeedback] = []
    for index, question in enumerate(result.questions):
        options: List[str] = []
        if exercise and index < exercise.question_count:
            options = exercise.questions[index].options
        feedback.append(
            QuestionFeedback(
                number=index + 1,
                prompt=question.prompt,
                is_correct=question.is_correct,
                user_answer=describe_answer(question.user_answer, options),
                correct_answer=describe_answer(
                    question.correct_answer, options
                ),
                image=question.image,
                commentary=question.commentary,
                source=question.source,
            )
        )

    band = score_band(result.score)
    return ResultView(
        score=result.score,
        band=band,
        message=SCORE_BAND_MESSAGES[band],
        attempt_number=result.attempt_number,
        attempts_remaining=format_attempts_remaining(
            result.attempts_remaining
        ),
        correct_count=result.correct_count,
        question_count=len(result.questions),
        questions=feedback,
    )


def render_result_text(view: ResultView) -> str:
    lines = [
        f'{view.score}% - {view.message}',
        f'Attempt: {view.attempt_number}   '
        f'Remaining: {view.attempts_remaining}   '
        f'Correct: {view.correct_count}/{view.question_count}',
        '',
    ]
    for question in view.questions:
        mark = 'OK' if question.is_correct else 'X'
        lines.append(f'[{mark}] Question {question.number}: {question.prompt}')
        if not question.is_correct:
            lines.append(f'    Your answer: {question.user_answer}')
        if question.commentary:
            lines.append(f'    Commentary: {question.commentary}')
        if question.source:
            lines.append(f'    Source: {question.source}')
    return '\n'.join(lines)

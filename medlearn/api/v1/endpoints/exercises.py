import logging
from contextlib import contextmanager
from typing import Annotated, Iterator, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from fastapi.routing import APIRoute

from medlearn.api.dependencies import (
    get_current_user,
    get_exercise_service,
    require_admin,
)
from medlearn.api.errors import BadRequestError, ForbiddenError, NotFoundError
from medlearn.api.schemas.answer import AnswerSubmissionSchema
from medlearn.api.schemas.exercise import (
    ExerciseCreateSchema,
    ExerciseListSchema,
    ExerciseUpdateSchema,
    MessageSchema,
    PaginationSchema,
)
from medlearn.config import settings
from medlearn.core.entities.exercise import Exercise
from medlearn.core.entities.exercise_answer import ExerciseAnswer
from medlearn.core.entities.result import ExerciseResult
from medlearn.core.entities.user import CurrentUser
from medlearn.core.enums import ExerciseType
from medlearn.core.exceptions import (
    AttemptsExhaustedError,
    ExerciseAccessDeniedError,
    ExerciseNotFoundError,
    InvalidExerciseError,
)
from medlearn.core.services.exercise import ExercisePage, ExerciseService

logger = logging.getLogger(__name__)
router = APIRouter(route_class=APIRoute)

ExerciseId = Annotated[int, Path(description='Exercise ID', ge=1)]
Page = Annotated[int, Query(description='Page number', ge=1)]
Limit = Annotated[
    int,
    Query(description='Page size', ge=1, le=settings.max_page_limit),
]


@contextmanager
def translate_domain_errors() -> Iterator[None]:
    try:
        yield
    except ExerciseNotFoundError as e:
        raise NotFoundError(str(e)) from e
    except ExerciseAccessDeniedError as e:
        raise ForbiddenError(
            'You do not have permission to access this exercise'
        ) from e
    except (AttemptsExhaustedError, InvalidExerciseError) as e:
        raise BadRequestError(str(e)) from e


def _to_list_schema(page: ExercisePage) -> ExerciseListSchema:
    return ExerciseListSchema(
        exercises=page.exercises,
        pagination=PaginationSchema(
            total=page.total, page=page.page, pages=page.pages
        ),
    )


@router.get(
    '/',
    response_model=ExerciseListSchema,
    response_model_exclude_none=True,
    summary='List exercises available to the caller',
)
async def list_exercises(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    lesson_id: Annotated[Optional[int], Query(alias='aulaId')] = None,
    exercise_type: Annotated[
        Optional[ExerciseType], Query(alias='tipo')
    ] = None,
    page: Page = 1,
    limit: Limit = settings.default_page_limit,
) -> ExerciseListSchema:
    exercise_page = await exercise_service.list_exercises(
        user=user,
        page=page,
        limit=limit,
        lesson_id=lesson_id,
        exercise_type=exercise_type,
    )
    return _to_list_schema(exercise_page)


@router.get(
    '/lesson/{lesson_id}',
    response_model=List[Exercise],
    response_model_exclude_none=True,
    summary='List the exercises of a lesson',
)
async def list_lesson_exercises(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    lesson_id: Annotated[int, Path(description='Lesson ID', ge=1)],
) -> List[Exercise]:
    return await exercise_service.list_lesson_exercises(lesson_id, user)


@router.get(
    '/admin/all',
    response_model=ExerciseListSchema,
    response_model_exclude_none=True,
    summary='List every exercise, answers included (admin)',
)
async def list_all_exercises(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    user: Annotated[CurrentUser, Depends(require_admin)],
    lesson_id: Annotated[Optional[int], Query(alias='aulaId')] = None,
    exercise_type: Annotated[
        Optional[ExerciseType], Query(alias='tipo')
    ] = None,
    page: Page = 1,
    limit: Limit = settings.default_page_limit,
) -> ExerciseListSchema:
    exercise_page = await exercise_service.list_exercises(
        user=user,
        page=page,
        limit=limit,
        lesson_id=lesson_id,
        exercise_type=exercise_type,
        include_all=True,
    )
    return _to_list_schema(exercise_page)


@router.get(
    '/{exercise_id}',
    response_model=Exercise,
    response_model_exclude_none=True,
    summary='Get an exercise',
    description=(
        'Returns the exercise with its questions. Correct answers, '
        'commentary and sources are only included for administrators.'
    ),
)
async def get_exercise(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    exercise_id: ExerciseId,
) -> Exercise:
    with translate_domain_errors():
        return await exercise_service.get_exercise(exercise_id, user)


@router.post(
    '/{exercise_id}/answer',
    response_model=ExerciseResult,
    summary='Submit the answers of an attempt',
    description=(
        'Grades the submitted answers, stores the attempt and returns the '
        'score with the correct answer of every question.'
    ),
)
async def answer_exercise(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    exercise_id: ExerciseId,
    submission: Annotated[
        AnswerSubmissionSchema, Body(description="User's answers")
    ],
) -> ExerciseResult:
    with translate_domain_errors():
        return await exercise_service.answer_exercise(
            exercise_id=exercise_id,
            user=user,
            answers=submission.answers,
        )


@router.get(
    '/{exercise_id}/my-answers',
    response_model=List[ExerciseAnswer],
    summary="List the caller's submissions, newest attempt first",
)
async def get_my_answers(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    exercise_id: ExerciseId,
) -> List[ExerciseAnswer]:
    return await exercise_service.get_user_answers(exercise_id, user)


@router.get(
    '/{exercise_id}/answers',
    response_model=List[ExerciseAnswer],
    summary='List every submission of an exercise (admin)',
)
async def get_exercise_answers(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    _: Annotated[CurrentUser, Depends(require_admin)],
    exercise_id: ExerciseId,
) -> List[ExerciseAnswer]:
    return await exercise_service.get_exercise_answers(exercise_id)


@router.post(
    '/',
    response_model=Exercise,
    status_code=status.HTTP_201_CREATED,
    summary='Create an exercise (admin)',
)
async def create_exercise(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    _: Annotated[CurrentUser, Depends(require_admin)],
    payload: Annotated[ExerciseCreateSchema, Body()],
) -> Exercise:
    if not payload.title or not payload.exercise_type or not payload.questions:
        raise BadRequestError('Title, type and questions are required')

    exercise = Exercise.model_validate(
        payload.model_dump(exclude_none=True)
    )
    with translate_domain_errors():
        return await exercise_service.create_exercise(exercise)


@router.put(
    '/{exercise_id}',
    response_model=Exercise,
    summary='Update an exercise (admin)',
)
async def update_exercise(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    _: Annotated[CurrentUser, Depends(require_admin)],
    exercise_id: ExerciseId,
    payload: Annotated[ExerciseUpdateSchema, Body()],
) -> Exercise:
    changes = {
        name: getattr(payload, name) for name in payload.model_fields_set
    }
    with translate_domain_errors():
        return await exercise_service.update_exercise(exercise_id, changes)


@router.delete(
    '/{exercise_id}',
    response_model=MessageSchema,
    summary='Delete an exercise and its submissions (admin)',
)
async def delete_exercise(
    exercise_service: Annotated[
        ExerciseService, Depends(get_exercise_service)
    ],
    _: Annotated[CurrentUser, Depends(require_admin)],
    exercise_id: ExerciseId,
) -> MessageSchema:
    with translate_domain_errors():
        await exercise_service.delete_exercise(exercise_id)
    return MessageSchema(message='Exercise deleted')

from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from medlearn.api.errors import ForbiddenError, UnauthorizedError
from medlearn.core.entities.user import CurrentUser
from medlearn.core.enums import UserRole
from medlearn.core.services.exercise import ExerciseService
from medlearn.db.db import get_async_session
from medlearn.db.repositories.exercise import SQLAlchemyExerciseRepository
from medlearn.db.repositories.exercise_answers import (
    SQLAlchemyExerciseAnswerRepository,
)


def get_exercise_service(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ExerciseService:
    return ExerciseService(
        exercise_repository=SQLAlchemyExerciseRepository(session),
        exercise_answer_repository=SQLAlchemyExerciseAnswerRepository(
            session
        ),
    )


def get_current_user(
    x_user_id: Annotated[Optional[int], Header()] = None,
    x_user_role: Annotated[Optional[str], Header()] = None,
) -> CurrentUser:
    """
    Resolves the caller from the identity headers forwarded by the
    authenticating gateway. A missing role means a visitor.
    """
    if x_user_id is None or x_user_id < 1:
        raise UnauthorizedError('Not authorized, user identity missing')
    try:
        role = UserRole(x_user_role) if x_user_role else UserRole.VISITOR
    except ValueError as e:
        raise UnauthorizedError(f'Unknown role: {x_user_role}') from e
    return CurrentUser(user_id=x_user_id, role=role)


def require_admin(
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    if not user.is_admin:
        raise ForbiddenError('Access restricted to administrators')
    return user

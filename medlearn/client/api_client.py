import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from medlearn.client.errors import ExerciseApiError
from medlearn.config import settings
from medlearn.core.entities.exercise import AnswerValue, Exercise
from medlearn.core.entities.exercise_answer import ExerciseAnswer
from medlearn.core.entities.result import ExerciseResult
from medlearn.core.enums import ExerciseType, UserRole

logger = logging.getLogger(__name__)

ExerciseKey = Union[int, str]


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """
    Pulls the human readable reason out of an error body. Accepts both
    `{"detail": ...}` and `{"message": ...}` payloads.
    """
    try:
        body = response.json()
    except json.JSONDecodeError:
        return response.text or None
    if not isinstance(body, dict):
        return None
    detail = body.get('detail', body.get('message'))
    if isinstance(detail, list) and detail:
        first = detail[0]
        return first.get('msg') if isinstance(first, dict) else str(first)
    return str(detail) if detail else None


@dataclass
class ExerciseCatalogPage:
    exercises: List[Exercise]
    total: int
    pages: int


class ExerciseApiClient:
    """
    Thin async client over the `/exercises` resource.

    Every failure, whether transport, HTTP status or an unexpected payload,
    is raised as ExerciseApiError; nothing is retried.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: str = settings.api_base_url,
        token: str = settings.api_token,
        user_id: int = settings.api_user_id,
        user_role: UserRole = settings.api_user_role,
        timeout: float = settings.api_request_timeout,
    ):
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self.base_url = base_url.rstrip('/')
        self.headers = {'Content-Type': 'application/json'}
        if token:
            self.headers['Authorization'] = f'Bearer {token}'
        if user_id:
            self.headers['X-User-Id'] = str(user_id)
            self.headers['X-User-Role'] = user_role.value

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> 'ExerciseApiClient':
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        fallback_message: str = 'Request to the exercise API failed',
    ) -> Any:
        url = f'{self.base_url}{path}'
        try:
            response = await self.http_client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self.headers,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            message = extract_error_message(e.response) or fallback_message
            logger.error(
                f'HTTP error on {method} {path}: '
                f'{e.response.status_code} - {message}'
            )
            raise ExerciseApiError(
                message, status_code=e.response.status_code
            ) from e
        except httpx.RequestError as e:
            logger.error(f'Request error on {method} {path}: {e}')
            raise ExerciseApiError(fallback_message) from e
        except json.JSONDecodeError as e:
            logger.error(f'JSON decode error for {method} {path}: {e}')
            raise ExerciseApiError(fallback_message) from e

    async def list_exercises(
        self,
        lesson_id: Optional[int] = None,
        exercise_type: Optional[ExerciseType] = None,
        page: int = 1,
        limit: int = settings.default_page_limit,
    ) -> ExerciseCatalogPage:
        params: Dict[str, Any] = {'page': page, 'limit': limit}
        if lesson_id is not None:
            params['aulaId'] = lesson_id
        if exercise_type is not None:
            params['tipo'] = exercise_type.value

        data = await self._request(
            'GET',
            '/exercises/',
            params=params,
            fallback_message='Could not load your exercises',
        )
        if not isinstance(data, dict):
            raise ExerciseApiError(
                'Expected an exercise page from the exercise API'
            )
        exercises = self._parse_list(Exercise, data.get('exercises') or [])
        pagination = data.get('pagination') or {}
        return ExerciseCatalogPage(
            exercises=exercises,
            total=pagination.get('total', len(exercises)),
            pages=pagination.get('pages', 1),
        )

    async def list_lesson_exercises(self, lesson_id: int) -> List[Exercise]:
        data = await self._request(
            'GET',
            f'/exercises/lesson/{lesson_id}',
            fallback_message='Could not load the lesson exercises',
        )
        return self._parse_list(Exercise, data)

    async def get_exercise(self, exercise_id: ExerciseKey) -> Exercise:
        data = await self._request(
            'GET',
            f'/exercises/{exercise_id}',
            fallback_message='Error loading exercise',
        )
        return self._parse(Exercise, data)

    async def submit_answers(
        self,
        exercise_id: ExerciseKey,
        answers: Sequence[Optional[AnswerValue]],
    ) -> ExerciseResult:
        data = await self._request(
            'POST',
            f'/exercises/{exercise_id}/answer',
            json_body={'respostas': list(answers)},
            fallback_message='Error submitting answers',
        )
        return self._parse(ExerciseResult, data)

    async def get_my_answers(
        self, exercise_id: ExerciseKey
    ) -> List[ExerciseAnswer]:
        data = await self._request(
            'GET',
            f'/exercises/{exercise_id}/my-answers',
            fallback_message='Could not load your previous answers',
        )
        return self._parse_list(ExerciseAnswer, data)

    @staticmethod
    def _parse(model: Any, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValueError as e:
            logger.error(f'Unexpected {model.__name__} payload: {e}')
            raise ExerciseApiError(
                f'Unexpected {model.__name__} payload from the exercise API'
            ) from e

    @classmethod
    def _parse_list(cls, model: Any, data: Any) -> List[Any]:
        if not isinstance(data, list):
            raise ExerciseApiError(
                f'Expected a list of {model.__name__} from the exercise API'
            )
        return [cls._parse(model, item) for item in data]

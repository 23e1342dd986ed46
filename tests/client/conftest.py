from typing import Callable, List

import httpx
import pytest

from medlearn.client.api_client import ExerciseApiClient
from medlearn.core.enums import UserRole

BASE_URL = 'http://test/api/v1'


@pytest.fixture
def sent_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_api_client(
    sent_requests,
) -> Callable[..., ExerciseApiClient]:
    """
    Builds an ExerciseApiClient whose HTTP traffic is answered by `handler`.
    Every request is recorded in `sent_requests` first.
    """

    def factory(handler, **kwargs) -> ExerciseApiClient:
        async def recording_handler(request: httpx.Request):
            sent_requests.append(request)
            response = handler(request)
            if not isinstance(response, httpx.Response):
                response = await response
            return response

        kwargs.setdefault('user_id', 7)
        kwargs.setdefault('user_role', UserRole.STUDENT)
        kwargs.setdefault('token', '')
        return ExerciseApiClient(
            http_client=httpx.AsyncClient(
                transport=httpx.MockTransport(recording_handler)
            ),
            base_url=BASE_URL,
            **kwargs,
        )

    return factory

from typing import AsyncGenerator
from unittest.mock import create_autospec

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from medlearn.api.dependencies import get_exercise_service
from medlearn.core.services.exercise import ExerciseService
from medlearn.main import app


@pytest.fixture
def mock_exercise_service():
    """ExerciseService whose async methods are AsyncMocks."""
    return create_autospec(ExerciseService, instance=True)


@pytest_asyncio.fixture
async def async_client(
    mock_exercise_service,
) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_exercise_service] = (
        lambda: mock_exercise_service
    )
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url='http://test'
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def student_headers():
    return {'X-User-Id': '7', 'X-User-Role': 'Aluno'}


@pytest.fixture
def admin_headers():
    return {'X-User-Id': '1', 'X-User-Role': 'Administrador'}

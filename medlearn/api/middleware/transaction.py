import logging

from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.requests import Request
from starlette.responses import Response

from medlearn.db.db import async_session_maker

logger = logging.getLogger(__name__)


class DBSessionMiddleware(BaseHTTPMiddleware):
    """
    One database session per request, exposed as `request.state.db`.
    Responses below 400 commit; error responses and exceptions roll back.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        async with async_session_maker() as session:
            request.state.db = session
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    f'Unhandled error on {request.method} '
                    f'{request.url.path}, rolling back'
                )
                await session.rollback()
                raise

            if response.status_code >= 400:
                logger.debug(
                    f'{request.method} {request.url.path} answered '
                    f'{response.status_code}, rolling back'
                )
                await session.rollback()
            else:
                await session.commit()
        return response

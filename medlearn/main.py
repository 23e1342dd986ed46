import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from medlearn.api.middleware.transaction import DBSessionMiddleware
from medlearn.api.v1.api import api_router
from medlearn.config import settings
from medlearn.db.db import engine, init_db
from medlearn.logging_config import configure_logging
from medlearn.sentry_sdk import sentry_init

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
    if not settings.debug:
        sentry_init()

    await init_db()

    logger.info('Application startup complete.')
    yield

    logger.info('Application shutdown initiated.')
    await engine.dispose()
    logger.info('Application shutdown complete.')


app = FastAPI(title='MedLearn Exercises API', lifespan=lifespan)

app.add_middleware(DBSessionMiddleware)

Instrumentator().instrument(app).expose(app)

app.include_router(api_router, prefix='/api/v1')


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('medlearn.main:app', reload=True)

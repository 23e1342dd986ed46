from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from medlearn.core.enums import UserRole


class Settings(BaseSettings):  # type: ignore
    debug: bool = False
    log_level: str = 'INFO'

    postgres_user: str = 'postgres'
    postgres_password: str = 'postgres'
    postgres_host: str = 'localhost'
    postgres_port: int = 5432
    postgres_db: str = 'postgres'
    database_url: str = (
        f'postgresql+asyncpg://'
        f'{postgres_user}:{postgres_password}'
        f'@{postgres_host}:{postgres_port}/{postgres_db}'
    )

    sentry_dsn: str = ''
    sentry_environment: str = 'production'
    sentry_traces_sample_rate: float = 0.2

    api_base_url: str = 'http://localhost:8000/api/v1'
    api_token: str = ''
    api_user_id: int = 0
    api_user_role: UserRole = UserRole.VISITOR
    api_request_timeout: float = 10.0

    unlimited_attempts_threshold: int = 999999
    unlimited_attempts_display_threshold: int = 999900
    default_allowed_attempts: int = 3
    default_allowed_roles: List[UserRole] = [
        UserRole.STUDENT,
        UserRole.ADMIN,
    ]
    default_page_limit: int = 20
    max_page_limit: int = 100

    excellent_score_threshold: int = 70
    good_score_threshold: int = 50

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )


settings = Settings()

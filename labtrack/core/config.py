# labtrack/core/config.py

from typing import Any, List, Literal, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',
        extra='ignore',                      # 모델에 없는 변수는 무시
        case_sensitive=True
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "LabTrack API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Laboratory sample tube & transport box tracking API"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for SQL echo and detailed logging")

    # --- 저장소(Storage) 설정 ---
    # memory: 프로세스 메모리 저장소 (개발/테스트용), database: SQLModel + PostgreSQL
    STORAGE_BACKEND: Literal["memory", "database"] = Field("memory", description="Storage backend selector")
    DATABASE_URL: Optional[SecretStr] = Field(None, description="Async database URL (e.g. postgresql+asyncpg://...)")
    SEED_DEFAULT_DATA: bool = Field(True, description="Create default labs and admin user on startup")
    DEFAULT_ADMIN_PASSWORD: SecretStr = Field(SecretStr("admin123"), description="Password of the seeded admin user")

    # --- JWT (JSON Web Token) 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(480, description="Access token expiration time in minutes")
    BADGE_LOGIN_ENABLED: bool = Field(True, description="Allow login by scanning a user badge barcode")

    # --- CORS 설정 ---
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # database 백엔드는 DATABASE_URL 없이 동작할 수 없습니다.
        if self.STORAGE_BACKEND == "database" and self.DATABASE_URL is None:
            raise ValueError("DATABASE_URL must be set when STORAGE_BACKEND is 'database'")


settings = Settings()

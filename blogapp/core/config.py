from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator
from pathlib import Path
from functools import lru_cache
from typing import List, Optional

# 프로젝트 루트 디렉토리
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# HS256 서명 키 최소 길이 (256 bit)
MIN_SECRET_KEY_BYTES = 32


class Settings(BaseSettings):
    """
    애플리케이션 환경 설정 모델
    - config/settings.env 파일과 환경 변수를 자동 로드
    - 필수값 누락 또는 잘못된 값이면 생성 시점에 ValidationError 발생 → 서버 기동 중단
    """
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / "config" / "settings.env"),
        env_file_encoding="utf-8",
        extra='ignore',
    )

    # Security & JWT
    JWT_SECRET_KEY: str = Field(
        ...,
        description="JWT 서명용 비밀 키 (32바이트 이상)",
    )
    JWT_ACCESS_TOKEN_EXPIRES_MINUTES: int = Field(
        60 * 24,
        description="액세스 토큰 만료 시간(분)",
    )
    REVOCATION_SWEEP_INTERVAL_SECONDS: int = Field(
        3600,
        description="만료된 블랙리스트 항목 정리 주기(초)",
    )

    # Database
    DB_USER:     str = "blogapp"
    DB_PASSWORD: str = "blogapp_pw"
    DB_HOST:     str = "localhost"
    DB_PORT:     int = 3306
    DB_NAME:     str = "blogapp"
    DATABASE_URL: Optional[str] = Field(
        None,
        description="전체 DB 연결 URL (우선순위: env > 자동 조합)",
    )

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="허용할 프론트엔드 도메인 목록",
    )

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def _validate_secret_key(cls, v: str) -> str:
        """
        HS256 서명 키가 256bit 미만이면 기동을 거부
        """
        if len(v.encode("utf-8")) < MIN_SECRET_KEY_BYTES:
            raise ValueError(
                f"JWT_SECRET_KEY는 최소 {MIN_SECRET_KEY_BYTES}바이트 이상이어야 합니다."
            )
        return v

    @field_validator("JWT_ACCESS_TOKEN_EXPIRES_MINUTES", "REVOCATION_SWEEP_INTERVAL_SECONDS")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("0보다 큰 값이어야 합니다.")
        return v

    @model_validator(mode="after")
    def _assemble_database_url(self) -> "Settings":
        """
        DATABASE_URL이 설정되어 있으면 그대로 사용하고, 없으면 개별 DB 설정값으로 URL을 조합
        """
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"mysql+asyncmy://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
            )
        return self

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """
        SQLAlchemy가 기대하는 이름의 DB 연결 문자열을 반환
        """
        return self.DATABASE_URL  # 항상 존재함


@lru_cache()
def get_settings() -> Settings:
    """
    Settings 인스턴스를 싱글톤으로 반환
    최초 호출 시 객체를 생성하고, 이후 캐싱된 인스턴스를 반환
    """
    return Settings()

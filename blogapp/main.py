import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional, Type

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from blogapp.core.config import Settings, get_settings
from blogapp.core.database import build_engine, build_session_factory, init_db
from blogapp.core.security import AuthorizationPolicy, PasswordHasher
from blogapp.jwt.blocklist import RevocationRegistry
from blogapp.jwt.revocation_sweep import revocation_sweep_loop
from blogapp.jwt.token_codec import TokenCodec
from blogapp.repositories.user_repository import UserRepository
from blogapp.routers.auth_router import router as auth_router
from blogapp.routers.user_router import router as user_router
from blogapp.services.request_authenticator import RequestAuthenticator
from blogapp.utils.exceptions import (
    ApiError, BadRequestError, ConflictError,
    NotFoundError, UnauthorizedError
)

# ─── 로그 설정 ─────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# ─── 예외 클래스 → Status Code 매핑 ───────────────────────────────────────
EXCEPTION_STATUS_MAP: dict[Type[Exception], int] = {
    BadRequestError: 400,
    ConflictError: 409,
    NotFoundError: 404,
    UnauthorizedError: 401,
}


def status_code_for(exc: Exception) -> int:
    """
    예외의 MRO를 따라 올라가며 가장 가까운 매핑 상태 코드를 찾음 (없으면 500)
    """
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return 500


async def handle_api_error(request: Request, exc: ApiError):
    """
    커스텀 ApiError를 일괄 처리
    EXCEPTION_STATUS_MAP에 매핑된 예외라면 해당 상태 코드로, 그렇지 않으면 500 Internal Server Error로 반환
    """
    return ORJSONResponse(status_code=status_code_for(exc), content={"detail": exc.message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성
    - 설정 검증 실패(비밀 키 누락/짧음, TTL<=0)는 여기서 예외로 드러나 서버가 기동되지 않음
    """
    settings = settings or get_settings()

    # ─── 애플리케이션 수명 주기 이벤트 핸들러 정의 ─────────────────────────
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        앱 시작 시 DB 초기화 및 블랙리스트 정리 작업 시작
        """
        engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)
        await init_db(engine)
        app.state.session_factory = build_session_factory(engine)

        sweep_task = asyncio.create_task(
            revocation_sweep_loop(
                app.state.revocation_registry,
                settings.REVOCATION_SWEEP_INTERVAL_SECONDS,
            )
        )
        try:
            yield
        finally:
            sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweep_task
            await engine.dispose()

    app = FastAPI(
        title="Blog API",
        description="블로그 게시 백엔드 - 토큰 인증 및 로그아웃 무효화",
        version="1.0.0",
        lifespan=lifespan,
    )

    # 인증 구성 요소는 앱당 한 번 생성하여 app.state로 공유
    registry = RevocationRegistry()
    app.state.settings = settings
    app.state.revocation_registry = registry
    app.state.token_codec = TokenCodec(
        settings.JWT_SECRET_KEY,
        timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRES_MINUTES),
        registry,
    )
    app.state.password_hasher = PasswordHasher()
    app.state.authorization_policy = AuthorizationPolicy()

    @app.middleware("http")
    async def authenticate_request(request: Request, call_next):
        """
        모든 요청의 Authorization 헤더를 판정하여 request.state에 사용자/권한을 남기고
        보호 라우트인데 Authenticated가 아니면 401로 차단
        """
        state = request.app.state
        async with state.session_factory() as session:
            authenticator = RequestAuthenticator(state.token_codec, UserRepository(session))
            verdict = await authenticator.authenticate(request.headers.get("authorization"))

        request.state.verdict = verdict
        request.state.user = verdict.principal
        request.state.authorities = verdict.authorities

        if not verdict.is_authenticated and state.authorization_policy.is_protected(
            request.method, request.url.path
        ):
            detail = verdict.reason.value if verdict.reason else "인증이 필요합니다."
            return ORJSONResponse(status_code=401, content={"detail": detail})
        return await call_next(request)

    # ─── CORS 설정 ─────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── 예외 처리 핸들러 등록───────────────────────────────────────────
    app.add_exception_handler(ApiError, handle_api_error)

    @app.get("/health")
    async def health_check() -> dict:
        """
        서비스 상태 확인용 엔드포인트
        """
        return {"status": "ok"}

    # ─── 라우터 등록 ───────────────────────────────────────────────────
    app.include_router(auth_router, prefix="/api")
    app.include_router(user_router, prefix="/api")

    return app


if __name__ == "__main__":
    uvicorn.run(
        "blogapp.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True
    )

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.database import get_db_session
from blogapp.core.security import PasswordHasher
from blogapp.jwt.blocklist import RevocationRegistry
from blogapp.jwt.token_codec import TokenCodec
from blogapp.models.user import User
from blogapp.services.auth_service import AuthService
from blogapp.services.user_service import UserService
from blogapp.utils.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


def get_revocation_registry(request: Request) -> RevocationRegistry:
    """
    앱 기동 시 생성된 블랙리스트 인스턴스 반환
    """
    return request.app.state.revocation_registry


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_auth_service(
    db: AsyncSession = Depends(get_db_session),
    codec: TokenCodec = Depends(get_token_codec),
    registry: RevocationRegistry = Depends(get_revocation_registry),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    """
    AuthService 의존성 주입 함수
    """
    return AuthService(db, codec, registry, hasher)


async def get_user_service(
    db: AsyncSession = Depends(get_db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(db, hasher)


async def get_current_user(request: Request) -> User:
    """
    현재 요청의 사용자를 가져오는 종속성 함수
    - 인증 미들웨어가 request.state에 남긴 판정 결과를 사용
    Raises:
        UnauthorizedError: Authenticated 판정이 아닌 경우
    """
    user = getattr(request.state, "user", None)
    if user is None:
        raise UnauthorizedError("인증이 필요합니다.")
    return user

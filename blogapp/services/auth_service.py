import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.security import PasswordHasher
from blogapp.jwt.blocklist import RevocationRegistry, strip_bearer_prefix
from blogapp.jwt.token_codec import TokenCodec
from blogapp.models.user import User
from blogapp.repositories.user_repository import UserRepository
from blogapp.schemas.auth_schema import LoginRequest, RegisterRequest
from blogapp.utils.exceptions import (
    AccountNotFoundError, DuplicateAccountError, InvalidCredentialsError,
    MalformedTokenError
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """발급된 토큰과 토큰이 가리키는 사용자"""
    token: str
    user: User


class PasswordAuthenticator:
    """
    1차 자격 증명 검증
    - 사용자명 또는 이메일 + 비밀번호 일치 여부 확인
    - 실패 사유(계정 없음/비밀번호 불일치)는 구분하지 않음
    """
    def __init__(self, user_repo: UserRepository, hasher: PasswordHasher):
        self.user_repo = user_repo
        self.hasher = hasher

    async def authenticate(self, username_or_email: str, password: str) -> User:
        user = (
            await self.user_repo.find_by_username(username_or_email)
            or await self.user_repo.find_by_email(username_or_email)
        )
        if not user or not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError("아이디 또는 비밀번호가 올바르지 않습니다.")
        return user


class AuthService:
    """
    인증 관련 서비스 클래스
    - 회원가입, 로그인, 로그아웃 기능 제공
    - 토큰 발급은 TokenCodec, 무효화는 RevocationRegistry에 위임
    """
    def __init__(
        self,
        db: AsyncSession,
        codec: TokenCodec,
        registry: RevocationRegistry,
        hasher: PasswordHasher,
        user_repo: Optional[UserRepository] = None,
        authenticator: Optional[PasswordAuthenticator] = None,
    ):
        self.db = db
        self.codec = codec
        self.registry = registry
        self.hasher = hasher
        self.user_repo = user_repo or UserRepository(db)
        self.authenticator = authenticator or PasswordAuthenticator(self.user_repo, hasher)

    async def register(self, data: RegisterRequest) -> AuthResult:
        # 1) 이메일/사용자명 중복 체크
        if (
            await self.user_repo.exists_by_email(data.email)
            or await self.user_repo.exists_by_username(data.username)
        ):
            raise DuplicateAccountError("이미 사용 중인 사용자명 또는 이메일입니다.")

        # 2) User 생성/저장
        user = User(
            username=data.username,
            email=data.email,
            password_hash=self.hasher.hash(data.password),
            full_name=data.full_name,
        )

        # 3) 저장 및 커밋 (동시 가입으로 인한 unique 충돌은 중복 가입으로 처리)
        try:
            await self.user_repo.create_user(user)
            await self.db.commit()
        except IntegrityError as e:
            logger.warning("회원가입 unique 제약 위반: %s", data.username)
            await self.db.rollback()
            raise DuplicateAccountError("이미 사용 중인 사용자명 또는 이메일입니다.") from e
        except Exception as e:
            logger.error(f"회원가입 커밋 실패: {e}")
            await self.db.rollback()
            raise

        logger.info("회원가입 완료: %s", user.username)

        # 4) 자동 로그인 토큰 발급
        return AuthResult(token=self.codec.issue(user), user=user)

    async def login(self, data: LoginRequest) -> AuthResult:
        """
        사용자명 또는 이메일 로그인
        - 자격 증명 검증 후 사용자명 → 이메일 순으로 사용자 조회
        """
        await self.authenticator.authenticate(data.username_or_email, data.password)

        user = (
            await self.user_repo.find_by_username(data.username_or_email)
            or await self.user_repo.find_by_email(data.username_or_email)
        )
        if not user:
            raise AccountNotFoundError("사용자를 찾을 수 없습니다.")

        return AuthResult(token=self.codec.issue(user), user=user)

    def logout(self, token: str) -> None:
        """
        로그아웃 + 토큰 블랙리스트 등록
        - 해석 가능한 토큰이면 자체 만료 시각을 함께 넘겨 정리 대상이 되도록 함
        """
        try:
            expires_at = self.codec.decode(strip_bearer_prefix(token)).expires_at
        except MalformedTokenError:
            logger.warning("토큰 디코딩 실패 (만료 시각 없이 블랙리스트 등록)")
            expires_at = None
        self.registry.revoke(token, expires_at)

"""
JWT 발급/해석 모듈

- 서버 비밀 키 하나와 고정 TTL로 HS256 토큰을 서명
- decode()는 서명만 검증 (만료/블랙리스트는 별도 판단)
- is_valid()는 만료 시 TokenExpiredError를 던지고,
  블랙리스트/사용자 불일치는 False로 반환
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from jose import jwt, JWTError
from pydantic import BaseModel, ConfigDict, ValidationError

from blogapp.jwt.blocklist import RevocationRegistry
from blogapp.utils.exceptions import MalformedTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Principal(Protocol):
    """
    토큰이 가리키는 사용자
    - username: 토큰 subject
    - id: 외부 식별자
    """
    id: str
    username: str


class Claims(BaseModel):
    """
    JWT 토큰 페이로드 모델
    - sub: 사용자 식별자 (username)
    - iat: 발급 시각 (epoch 초)
    - exp: 만료 시각 (epoch 초)
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str
    iat: int
    exp: int

    @property
    def subject(self) -> str:
        return self.sub

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.iat, tz=timezone.utc)

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


class TokenCodec:
    """
    JWT 토큰 서명/검증 서비스
    - 생성 이후 비밀 키와 TTL은 바뀌지 않으므로 동시 사용 시 잠금 불필요
    """
    def __init__(
        self,
        secret_key: str,
        ttl: timedelta,
        registry: RevocationRegistry,
        clock: Optional[Clock] = None,
    ):
        self._secret_key = secret_key
        self._ttl = ttl
        self._registry = registry
        self._clock = clock or utc_now

    def issue(self, principal: Principal) -> str:
        """
        사용자에 대한 새 액세스 토큰 발급
        """
        now = self._clock()
        payload = {
            "sub": principal.username,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def decode(self, token: str) -> Claims:
        """
        서명을 검증하고 Claims 반환
        - 만료 여부와 블랙리스트 등재 여부는 확인하지 않음
        Raises:
            MalformedTokenError: 서명 불일치, 형식 오류, 필수 클레임 누락
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
            return Claims(**payload)
        except (JWTError, ValidationError) as e:
            logger.debug("토큰 해석 실패: %s", e)
            raise MalformedTokenError("유효하지 않은 토큰입니다.") from e

    def extract_username(self, token: str) -> str:
        return self.decode(token).subject

    def is_valid(self, token: str, principal: Principal) -> bool:
        """
        토큰이 해당 사용자에 대해 지금 유효한지 판단
        Raises:
            MalformedTokenError: 서명 불일치 또는 형식 오류
            TokenExpiredError: 만료 시각이 지난 토큰
        """
        claims = self.decode(token)
        if self._clock().timestamp() >= claims.exp:
            raise TokenExpiredError("토큰이 만료되었습니다.")
        if claims.subject != principal.username:
            return False
        return not self._registry.is_revoked(token)

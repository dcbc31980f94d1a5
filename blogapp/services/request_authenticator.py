"""
요청 단위 인증 판정 모듈

Authorization 헤더 하나를 받아 Verdict(판정 결과)를 만든다.

    헤더 없음                 → UNAUTHENTICATED
    해석 실패                 → REJECTED(MALFORMED)
    subject 사용자 없음       → REJECTED(UNKNOWN_SUBJECT)
    만료                      → REJECTED(EXPIRED)
    블랙리스트/사용자 불일치  → REJECTED(REVOKED_OR_MISMATCHED)
    그 외                     → AUTHENTICATED(user)

라우트별 접근 허용 여부는 AuthorizationPolicy가 이 판정을 보고 결정한다.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from blogapp.jwt.blocklist import strip_bearer_prefix
from blogapp.jwt.token_codec import TokenCodec
from blogapp.models.user import User
from blogapp.repositories.user_repository import UserRepository
from blogapp.utils.exceptions import MalformedTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

DEFAULT_AUTHORITIES: Tuple[str, ...] = ("ROLE_USER",)


class VerdictStatus(str, enum.Enum):
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    REJECTED = "rejected"


class RejectReason(str, enum.Enum):
    MALFORMED = "malformed"
    UNKNOWN_SUBJECT = "unknown-subject"
    EXPIRED = "expired"
    REVOKED_OR_MISMATCHED = "revoked-or-mismatched"


@dataclass(frozen=True)
class Verdict:
    status: VerdictStatus
    reason: Optional[RejectReason] = None
    principal: Optional[User] = None
    authorities: Tuple[str, ...] = ()

    @classmethod
    def authenticated(
        cls, principal: User, authorities: Tuple[str, ...] = DEFAULT_AUTHORITIES
    ) -> "Verdict":
        return cls(VerdictStatus.AUTHENTICATED, principal=principal, authorities=authorities)

    @classmethod
    def unauthenticated(cls) -> "Verdict":
        return cls(VerdictStatus.UNAUTHENTICATED)

    @classmethod
    def rejected(cls, reason: RejectReason) -> "Verdict":
        return cls(VerdictStatus.REJECTED, reason=reason)

    @property
    def is_authenticated(self) -> bool:
        return self.status is VerdictStatus.AUTHENTICATED


class RequestAuthenticator:
    """
    Authorization 헤더 → Verdict 변환기
    - 토큰 자체 검증은 DB 조회 없이 수행, subject 사용자 조회만 UserRepository 사용
    """
    def __init__(self, codec: TokenCodec, user_repo: UserRepository):
        self.codec = codec
        self.user_repo = user_repo

    async def authenticate(self, authorization: Optional[str]) -> Verdict:
        # 1) 헤더 없음 → 공개 라우트는 그대로 접근 가능
        if not authorization:
            return Verdict.unauthenticated()

        token = strip_bearer_prefix(authorization)

        # 2) 서명/형식 검증
        try:
            claims = self.codec.decode(token)
        except MalformedTokenError:
            logger.warning("해석할 수 없는 토큰으로 요청")
            return Verdict.rejected(RejectReason.MALFORMED)

        # 3) subject 사용자 조회
        user = await self.user_repo.find_by_username(claims.subject)
        if not user:
            logger.warning("토큰의 사용자(%s) 조회 실패", claims.subject)
            return Verdict.rejected(RejectReason.UNKNOWN_SUBJECT)

        # 4) 만료/블랙리스트/사용자 일치 확인
        try:
            valid = self.codec.is_valid(token, user)
        except TokenExpiredError:
            logger.info("만료된 토큰으로 요청: %s", claims.subject)
            return Verdict.rejected(RejectReason.EXPIRED)
        if not valid:
            logger.warning("무효화된 토큰으로 요청: %s", claims.subject)
            return Verdict.rejected(RejectReason.REVOKED_OR_MISMATCHED)

        return Verdict.authenticated(user)

import re
from typing import Optional, Pattern, Sequence, Tuple

from passlib.context import CryptContext


class PasswordHasher:
    """
    비밀번호 해시/검증 래퍼 (bcrypt)
    """
    def __init__(self, rounds: Optional[int] = None):
        options = {"bcrypt__rounds": rounds} if rounds else {}
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", **options)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._context.verify(password, password_hash)


# (HTTP 메서드 또는 None=모든 메서드, 경로 정규식)
Rule = Tuple[Optional[str], Pattern[str]]


def _prefix(path: str) -> Pattern[str]:
    """
    "/api/auth" → "/api/auth" 및 "/api/auth/..." 전부 매칭
    """
    return re.compile(rf"^{re.escape(path)}(/.*)?$")


DEFAULT_PUBLIC_RULES: Sequence[Rule] = (
    (None, _prefix("/api/auth")),
    (None, _prefix("/health")),
    ("GET", _prefix("/api/posts")),
    ("GET", _prefix("/api/tags")),
    ("GET", _prefix("/docs")),
    ("GET", _prefix("/redoc")),
    ("GET", _prefix("/openapi.json")),
)


class AuthorizationPolicy:
    """
    라우트별 공개/보호 여부 판단
    - 공개 라우트: 인증 없이 접근 가능
    - 그 외 모든 라우트: Authenticated 판정이 필요
    """
    def __init__(self, public_rules: Sequence[Rule] = DEFAULT_PUBLIC_RULES):
        self._public_rules = tuple(public_rules)

    def is_public(self, method: str, path: str) -> bool:
        method = method.upper()
        # CORS preflight는 항상 통과
        if method == "OPTIONS":
            return True
        return any(
            (rule_method is None or rule_method == method) and pattern.match(path)
            for rule_method, pattern in self._public_rules
        )

    def is_protected(self, method: str, path: str) -> bool:
        return not self.is_public(method, path)

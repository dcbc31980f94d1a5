"""
JWT 블랙리스트 모듈

서버 메모리 기반으로 로그아웃된 토큰 문자열을 관리
- 로그아웃 시 토큰을 블랙리스트에 추가하여 만료 전이라도 무효화.
- 인증 처리 시 블랙리스트에 등재된 토큰은 인증 거부 대상
- 여러 요청 스레드에서 동시에 접근하므로 모든 연산을 Lock으로 보호

전역 변수가 아닌 인스턴스로 만들어 앱 기동 시 한 번 생성 후 주입한다.
다중 서버 환경에서는 Redis 등 외부 저장소 구현으로 교체해야 함
"""

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

BEARER_PREFIX = "Bearer "


def strip_bearer_prefix(value: str) -> str:
    """
    맨 앞의 "Bearer " 접두어를 한 번만 제거
    """
    if value.startswith(BEARER_PREFIX):
        return value[len(BEARER_PREFIX):]
    return value


class RevocationRegistry:
    """
    무효화된 토큰 저장소
    - 키: 접두어가 제거된 토큰 문자열
    - 값: 토큰 자체의 만료 시각 (알 수 없으면 None → 정리 대상에서 제외)
    """
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, Optional[datetime]] = {}

    def revoke(self, token: str, expires_at: Optional[datetime] = None) -> str:
        """
        토큰을 블랙리스트에 등록하고 실제 저장된 문자열을 반환
        - "Bearer " 접두어는 등록 시점에만 제거됨
        - 같은 토큰을 여러 번 등록해도 결과는 동일
        """
        raw = strip_bearer_prefix(token)
        with self._lock:
            known = self._entries.get(raw)
            # 이미 만료 시각을 알고 있으면 유지
            self._entries[raw] = known or expires_at
        return raw

    def is_revoked(self, token: str) -> bool:
        """
        등록된 문자열과 정확히 일치하는지만 확인 (접두어 정규화 없음)
        """
        with self._lock:
            return token in self._entries

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """
        토큰 자체 만료 시각이 지난 항목을 제거하고 제거 건수를 반환
        """
        now = now or datetime.now(timezone.utc)
        with self._lock:
            expired = [
                token for token, expires_at in self._entries.items()
                if expires_at is not None and expires_at <= now
            ]
            for token in expired:
                del self._entries[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

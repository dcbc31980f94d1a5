"""Background cleanup of revocation entries whose tokens have already expired."""

import asyncio
import logging

from blogapp.jwt.blocklist import RevocationRegistry

logger = logging.getLogger(__name__)


async def revocation_sweep_loop(registry: RevocationRegistry, interval_seconds: int) -> None:
    """
    주기적으로 만료된 블랙리스트 항목을 제거하여 메모리 누수를 방지
    - 만료된 토큰은 블랙리스트가 없어도 TokenExpiredError로 거부되므로 제거해도 안전
    """
    while True:
        try:
            await asyncio.sleep(interval_seconds)
            removed = registry.purge_expired()
            if removed > 0:
                logger.info("블랙리스트 정리: 만료 항목 %d건 제거 (잔여 %d건)", removed, len(registry))
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.warning(f"블랙리스트 정리 오류: {e}")

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.security import PasswordHasher
from blogapp.models.user import User
from blogapp.schemas.user_schema import PasswordUpdateRequest, ProfileUpdateRequest
from blogapp.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)


class UserService:
    """
    로그인한 사용자 본인의 프로필/비밀번호 수정
    """
    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    async def update_profile(self, user: User, data: ProfileUpdateRequest) -> User:
        # 요청에 포함된 필드만 반영
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await self._commit()
        await self.db.refresh(user)
        return user

    async def update_password(self, user: User, data: PasswordUpdateRequest) -> None:
        if not self.hasher.verify(data.current_password, user.password_hash):
            raise BadRequestError("현재 비밀번호가 올바르지 않습니다.")
        user.password_hash = self.hasher.hash(data.new_password)
        await self._commit()
        logger.info("비밀번호 변경: %s", user.username)

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except Exception as e:
            logger.error(f"사용자 정보 커밋 실패: {e}")
            await self.db.rollback()
            raise

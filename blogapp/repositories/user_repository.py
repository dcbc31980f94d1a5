from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.models.user import User


class UserRepository:
    """
    사용자 관련 데이터 액세스 담당 Repository 클래스
    - 인증 계층이 사용하는 사용자 디렉터리 역할 (조회/존재 확인/저장)
    """
    def __init__(self, session: AsyncSession):
        """
        session: 비동기 SQLAlchemy 세션
        """
        self.session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        """
        주어진 사용자명과 일치하는 User 객체 반환
        """
        query = select(User).where(User.username == username)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def find_by_email(self, email: str) -> Optional[User]:
        """
        주어진 이메일과 일치하는 User 객체 반환
        """
        query = select(User).where(User.email == email)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def exists_by_username(self, username: str) -> bool:
        return await self.find_by_username(username) is not None

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def create_user(self, user: User) -> User:
        """
        새 User 엔티티를 세션에 추가하고 PK 할당을 위해 flush
        """
        self.session.add(user)
        await self.session.flush()
        return user

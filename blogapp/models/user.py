import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from blogapp.core.database import Base


def _new_user_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    서비스 사용자(User) 모델
    - 블로그 작성자/댓글 작성자의 기본 계정 정보를 저장
    - username은 JWT의 sub 클레임으로 사용됨
    """
    __tablename__ = "users"

    id: str = Column(
        String(36),
        primary_key=True,
        default=_new_user_id,
        doc="사용자 고유 ID (UUID)"
    )
    username: str = Column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        doc="로그인 ID 겸 토큰 subject"
    )
    email: str = Column(
        String(120),
        unique=True,
        index=True,
        nullable=False,
        doc="사용자 이메일(로그인 ID로도 사용 가능)"
    )
    password_hash: str = Column(
        String(255),
        nullable=False,
        doc="해시 처리된 비밀번호"
    )
    full_name: str = Column(
        String(100),
        nullable=True,
        doc="표시 이름"
    )
    bio: str = Column(
        String(500),
        nullable=True,
        doc="자기소개"
    )
    avatar_url: str = Column(
        String(255),
        nullable=True,
        doc="프로필 이미지 URL"
    )
    created_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
        doc="가입 시각"
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
        doc="마지막 수정 시각"
    )

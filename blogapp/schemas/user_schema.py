from pydantic import AliasChoices, BaseModel, Field
from typing import Optional

# ─── 사용자 관련 요청 스키마 정의 ───────────────────────────────────────

class ProfileUpdateRequest(BaseModel):
    """
    프로필 수정 요청 모델
    - 전달된 필드만 갱신
    """
    full_name: Optional[str] = Field(
        None,
        max_length=100,
        validation_alias=AliasChoices("full_name", "fullName"),
        description="표시 이름",
    )
    bio: Optional[str] = Field(
        None, max_length=500, description="자기소개"
    )
    avatar_url: Optional[str] = Field(
        None,
        max_length=255,
        validation_alias=AliasChoices("avatar_url", "avatarUrl"),
        description="프로필 이미지 URL",
    )


class PasswordUpdateRequest(BaseModel):
    """
    비밀번호 변경 요청 모델
    """
    current_password: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("current_password", "currentPassword"),
        description="현재 비밀번호",
    )
    new_password: str = Field(
        ...,
        min_length=6,
        validation_alias=AliasChoices("new_password", "newPassword"),
        description="새 비밀번호",
    )

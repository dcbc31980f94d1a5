from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field
from pydantic import ConfigDict

# ─── 인증 관련 요청/응답 스키마 정의 ─────────────────────────────────────

class RegisterRequest(BaseModel):
    """
    회원가입 요청 모델
    - 사용자명, 이메일, 비밀번호, 표시 이름을 포함
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "username":  "testuser",
                "email":     "test@example.com",
                "password":  "password123",
                "full_name": "Test User",
            }
        },
    )

    username:  str           = Field(..., min_length=3, max_length=50, description="사용자 이름")
    email:     EmailStr      = Field(..., description="이메일 주소")
    password:  str           = Field(..., min_length=6, description="비밀번호")
    full_name: Optional[str] = Field(
        None,
        max_length=100,
        validation_alias=AliasChoices("full_name", "fullName"),
        description="표시 이름",
    )


class LoginRequest(BaseModel):
    """
    로그인 요청 모델
    - 사용자명 또는 이메일과 비밀번호로 인증 수행
    """
    model_config = ConfigDict(extra="ignore")
    username_or_email: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("username_or_email", "usernameOrEmail"),
        description="사용자명 또는 이메일",
    )
    password: str = Field(..., min_length=1, description="비밀번호")


class UserResponse(BaseModel):
    """
    외부에 노출하는 사용자 정보 (비밀번호 해시 제외)
    """
    model_config = ConfigDict(from_attributes=True)

    id:         str                = Field(..., description="사용자 고유 ID")
    username:   str                = Field(..., description="사용자 이름")
    email:      str                = Field(..., description="이메일 주소")
    full_name:  Optional[str]      = Field(None, description="표시 이름")
    bio:        Optional[str]      = Field(None, description="자기소개")
    avatar_url: Optional[str]      = Field(None, description="프로필 이미지 URL")
    created_at: Optional[datetime] = Field(None, description="가입 시각")


class AuthResponse(BaseModel):
    """
    인증 토큰 응답 모델
    - 발급된 토큰과 해당 사용자 정보
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "user": {"id": "6f1c...", "username": "testuser", "email": "test@example.com"},
            }
        },
    )

    token: str          = Field(..., description="JWT 토큰")
    user:  UserResponse = Field(..., description="인증된 사용자")


class MessageResponse(BaseModel):
    """
    단순 메시지 응답 모델
    - API 처리 결과를 간단한 메시지로 반환할 때 사용
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {"message": "Operation successful"}
        },
    )

    message: str = Field(..., description="응답 메시지")

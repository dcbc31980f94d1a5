import logging

from fastapi import APIRouter, Depends, Request, status

from blogapp.dependencies import get_auth_service
from blogapp.schemas.auth_schema import (
    AuthResponse, LoginRequest, MessageResponse, RegisterRequest, UserResponse
)
from blogapp.services.auth_service import AuthResult, AuthService
from blogapp.utils.exceptions import MissingAuthorizationHeaderError

# 로거 설정
logger = logging.getLogger(__name__)

# 라우터 인스턴스
router = APIRouter(prefix="/auth", tags=["Auth"])


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(token=result.token, user=UserResponse.model_validate(result.user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    회원가입 후 바로 로그인 토큰 발급
    """
    return _to_response(await auth_service.register(req))


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    사용자명 또는 이메일 로그인 처리 후 토큰 발급
    """
    return _to_response(await auth_service.login(req))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Authorization 헤더의 토큰을 블랙리스트에 등록
    """
    auth_header = request.headers.get("authorization")
    if not auth_header:
        raise MissingAuthorizationHeaderError("Authorization 헤더가 필요합니다.")

    auth_service.logout(auth_header)
    return MessageResponse(message="로그아웃 성공")

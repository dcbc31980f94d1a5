import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blogapp.core.database import get_db_session
from blogapp.dependencies import get_current_user, get_user_service
from blogapp.models.user import User
from blogapp.repositories.user_repository import UserRepository
from blogapp.schemas.auth_schema import MessageResponse, UserResponse
from blogapp.schemas.user_schema import PasswordUpdateRequest, ProfileUpdateRequest
from blogapp.services.user_service import UserService
from blogapp.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["User"])


async def _load_current_user(current_user: User, db: AsyncSession) -> User:
    """
    인증 단계에서 조회한 사용자를 현재 요청 세션으로 다시 조회
    """
    user = await UserRepository(db).find_by_id(current_user.id)
    if not user:
        logger.error("로그인된 사용자를 DB에서 찾을 수 없음: %s", current_user.username)
        raise NotFoundError("사용자를 찾을 수 없습니다.")
    return user


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="내 프로필 조회",
)
async def get_profile(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="내 프로필 수정",
)
async def update_profile(
    req: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await _load_current_user(current_user, db)
    return UserResponse.model_validate(await user_service.update_profile(user, req))


@router.put(
    "/password",
    response_model=MessageResponse,
    summary="비밀번호 변경",
)
async def update_password(
    req: PasswordUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    user = await _load_current_user(current_user, db)
    await user_service.update_password(user, req)
    return MessageResponse(message="비밀번호 변경 완료")

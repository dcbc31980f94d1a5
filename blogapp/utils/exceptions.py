class ApiError(Exception):
    """
    기본 API 예외의 최상위 클래스
    - 모든 커스텀 API 예외가 이 클래스를 상속
    - FastAPI의 예외 핸들러에 의해 처리
    """
    def __init__(self, message: str):
        """
        - message: 사용자에게 전달할 예외 메시지 문자열
        """
        # 예외 메시지 설정
        self.message = message
        # 상위 Exception 초기화
        super().__init__(message)


class BadRequestError(ApiError):
    """400 Bad Request"""
    pass


class UnauthorizedError(ApiError):
    """401 Unauthorized"""
    pass


class NotFoundError(ApiError):
    """404 Not Found"""
    pass


class ConflictError(ApiError):
    """409 Conflict"""
    pass


# ─── 인증 관련 예외 ─────────────────────────────────────────────────────

class DuplicateAccountError(BadRequestError):
    """회원가입 시 사용자명 또는 이메일 중복"""
    pass


class AccountNotFoundError(BadRequestError):
    """로그인 대상 계정을 사용자명/이메일 어느 쪽으로도 찾지 못함"""
    pass


class MissingAuthorizationHeaderError(BadRequestError):
    """Authorization 헤더가 필요한 요청에 헤더가 없음"""
    pass


class InvalidCredentialsError(UnauthorizedError):
    """아이디 또는 비밀번호 불일치 (어느 쪽이 틀렸는지는 노출하지 않음)"""
    pass


class MalformedTokenError(UnauthorizedError):
    """서명 불일치 또는 해석할 수 없는 토큰"""
    pass


class TokenExpiredError(UnauthorizedError):
    """토큰에 포함된 만료 시각이 지남"""
    pass

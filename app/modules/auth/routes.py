from fastapi import APIRouter, Depends, Request
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, AuthResponse, EnrichedUser, MessageResponse,
    PasswordChangeRequest, PasswordResetRequest, PasswordResetConfirm, EmailVerificationRequest
)
from app.modules.auth.service import AuthService
from app.core.dependencies import get_auth_service, get_current_token, get_current_user
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user with a default role"""
    return service.register(
        register_data,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent")
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get a session"""
    return service.login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=EnrichedUser)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Get current authenticated user with roles and permissions (for frontend UI)"""
    return service.get_me(current_user)


@router.post("/password/change", response_model=MessageResponse)
async def change_password(
    change: PasswordChangeRequest,
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    return service.change_password(current_user, change)


@router.post("/password/reset", response_model=MessageResponse)
async def request_password_reset(
    reset: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.request_password_reset(reset.email)


@router.post("/password/reset/confirm", response_model=MessageResponse)
async def confirm_password_reset(
    confirm: PasswordResetConfirm,
    service: AuthService = Depends(get_auth_service)
):
    return service.confirm_password_reset(confirm)


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    verification: EmailVerificationRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.verify_email(verification.token)


@router.post("/verify-email/resend", response_model=MessageResponse)
async def resend_verification(
    reset: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    return service.resend_verification(reset.email)


@router.post("/sessions/revoke-all", response_model=MessageResponse)
async def revoke_all_sessions(
    token: str = Depends(get_current_token),
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Sign out of every device"""
    return service.revoke_all_sessions(token, current_user["id"])

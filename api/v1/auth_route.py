from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.response_envelope import document_response
from schemas.user_schema import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserProfile,
    VerifyEmailRequest,
)
from security.auth import verify_any_token
from security.principal import AuthPrincipal
from services.auth_service import (
    authenticate_user,
    register_user,
    request_password_reset,
    reset_password,
    retrieve_user,
    send_verification_email,
    verify_email,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register")
@document_response(
    message="Account created successfully",
    status_code=status.HTTP_201_CREATED,
    response_codes={409: "Email is already registered", 422: "Invalid payload"},
)
async def register(payload: RegisterRequest):
    return await register_user(payload)


@router.post("/login")
@document_response(message="Logged in successfully", response_codes={401: "Invalid email or password"})
async def login(payload: LoginRequest):
    return await authenticate_user(payload)


@router.get("/me")
@document_response(message="User fetched successfully")
async def me(principal: AuthPrincipal = Depends(verify_any_token)):
    return UserProfile.from_user(await retrieve_user(principal.user_id))


@router.post("/logout")
@document_response(message="Logged out successfully")
async def logout(principal: AuthPrincipal = Depends(verify_any_token)):
    # Tokens are stateless; the client discards its copy.
    return {"message": "Logged out successfully"}


@router.post("/send-verification")
@document_response(message="Verification email sent", response_codes={400: "Email is already verified"})
async def send_verification(principal: AuthPrincipal = Depends(verify_any_token)):
    return await send_verification_email(principal.user_id)


@router.post("/verify-email")
@document_response(message="Email verified successfully", response_codes={400: "Invalid or expired token"})
async def verify_email_address(payload: VerifyEmailRequest):
    return await verify_email(payload.token)


@router.post("/forgot-password")
@document_response(message="Password reset requested")
async def forgot_password(payload: ForgotPasswordRequest):
    return await request_password_reset(payload.email)


@router.post("/reset-password")
@document_response(message="Password reset successfully", response_codes={400: "Invalid or expired token"})
async def reset_user_password(payload: ResetPasswordRequest):
    return await reset_password(payload)

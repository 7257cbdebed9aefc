from schemas.imports import *
from security.hash import hash_password


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(default="User", min_length=1)

    model_config = {"extra": "forbid"}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    model_config = {"extra": "forbid"}


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8)


class UserCreate(BaseModel):
    email: EmailStr
    name: str
    password: str
    email_verified: bool = False
    email_verification_token: Optional[str] = None
    email_verification_expires: Optional[datetime] = None
    date_created: int = Field(default_factory=epoch)
    last_updated: int = Field(default_factory=epoch)

    @model_validator(mode="after")
    def obscure_password(self):
        self.password = hash_password(self.password)
        return self


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)


class UserOut(MongoOutModel):
    email: EmailStr
    name: str
    password: Optional[str] = None
    email_verified: bool = False
    email_verification_token: Optional[str] = None
    email_verification_expires: Optional[datetime] = None
    password_reset_token: Optional[str] = None
    password_reset_expires: Optional[datetime] = None
    date_created: Optional[int] = None
    last_updated: Optional[int] = None


class UserProfile(BaseModel):
    id: str
    email: EmailStr
    name: str
    email_verified: bool
    date_created: Optional[int] = None

    @classmethod
    def from_user(cls, user: UserOut) -> "UserProfile":
        return cls(
            id=user.id or "",
            email=user.email,
            name=user.name,
            email_verified=user.email_verified,
            date_created=user.date_created,
        )


class AuthResponse(BaseModel):
    token: str
    user: UserProfile


class MessageResponse(BaseModel):
    message: str

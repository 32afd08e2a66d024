import re

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

USERNAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9]+$")
PASSWORD_SPECIAL_CHARS = "!@#$"


class UserRegister(BaseModel):
    """User registration request."""

    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    username: str = Field(min_length=2, max_length=12)
    password: str = Field(min_length=8, max_length=20)
    confirm_password: str

    @field_validator("email")
    @classmethod
    def email_length(cls, v: str) -> str:
        if len(v) > 50:
            raise ValueError("Email should be 50 characters or less")
        return v

    @field_validator("username")
    @classmethod
    def username_format(cls, v: str) -> str:
        if not USERNAME_PATTERN.fullmatch(v):
            raise ValueError(
                "Username should start with an alphabet and must include only "
                "alphabets (a-z, A-Z), numbers (0-9)"
            )
        return v

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if not (
            any(c.islower() for c in v)
            and any(c.isupper() for c in v)
            and any(c.isdigit() for c in v)
            and any(c in PASSWORD_SPECIAL_CHARS for c in v)
        ):
            raise ValueError(
                "Invalid password. Must contain at least one - upper case letter, "
                "lowercase letter, digit, and special character (!@#$)"
            )
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    """User login request."""

    username: str
    password: str


class Token(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"

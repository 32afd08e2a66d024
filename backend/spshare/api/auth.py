from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..core.database import get_db
from ..core.deps import get_current_user
from ..core.security import create_access_token
from ..models.user import User
from ..schemas.auth import Token, UserLogin, UserRegister
from ..schemas.user import UserResponse
from ..services import users as user_service

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new user. The account stays pending until an admin approves it."""
    return user_service.register_user(db, user_data)


@router.post("/login", response_model=Token)
async def login(user_data: UserLogin, db: Session = Depends(get_db)):
    """Login user and return a JWT access token."""
    user = user_service.authenticate(db, user_data.username, user_data.password)
    return Token(access_token=create_access_token(subject=str(user.id)))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information, whatever the approval state."""
    return current_user

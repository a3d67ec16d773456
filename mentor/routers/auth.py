import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from mentor.config import ADMIN_SETUP_ENABLED
from mentor.database import get_db
from mentor.models.user import User, Profile, UserRole
from mentor.schemas.user import (
    UserCreate,
    AdminSetupRequest,
    TokenResponse,
    RefreshTokenRequest,
    PasswordUpdateRequest,
    UserResponse,
)
from mentor.services.auth import (
    get_password_hash,
    verify_password,
    is_strong_password,
    is_valid_mobile,
    create_tokens,
    decode_token,
)
from mentor.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

WEAK_PASSWORD_MESSAGE = "Password must be at least 8 characters with one number and one uppercase letter"


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        created_at=user.created_at,
        roles=[r.role for r in user.roles],
    )


def _create_account(db: Session, email: str, password: str, name: str, mobile=None, role: str = "user") -> User:
    user = User(email=email, hashed_password=get_password_hash(password))
    db.add(user)
    db.flush()

    db.add(Profile(user_id=user.id, name=name, email=email, mobile=mobile))
    db.add(UserRole(user_id=user.id, role=role))
    db.commit()
    db.refresh(user)
    return user


@router.post("/register", response_model=TokenResponse)
async def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user with email and password."""
    email = user_data.email.lower()
    mobile = (user_data.mobile or "").strip() or None

    if not user_data.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")

    if not is_strong_password(user_data.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=WEAK_PASSWORD_MESSAGE)

    if mobile and not is_valid_mobile(mobile):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter a valid 10-digit mobile number",
        )

    duplicate_email = db.query(User).filter(User.email == email).first() is not None
    duplicate_mobile = bool(mobile) and (
        db.query(Profile).filter(Profile.mobile == mobile).first() is not None
    )

    if duplicate_email and duplicate_mobile:
        detail = "Email and mobile number are already registered"
    elif duplicate_email:
        detail = "Email is already registered"
    elif duplicate_mobile:
        detail = "Mobile number is already registered"
    else:
        detail = None
    if detail:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    user = _create_account(db, email, user_data.password, user_data.name.strip(), mobile)
    logger.info("[Auth] Registered user %s", user.id)
    return create_tokens(user.id)


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Login with email and password."""
    user = db.query(User).filter(User.email == form_data.username.lower()).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is disabled",
        )

    user.last_login = datetime.utcnow()
    db.commit()

    return create_tokens(user.id)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(request: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Refresh access token using refresh token."""
    payload = decode_token(request.refresh_token)

    if payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    user = db.query(User).filter(User.id == payload.get("sub")).first()

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return create_tokens(user.id)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user info."""
    return user_response(current_user)


@router.put("/password")
async def update_password(
    update_data: PasswordUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update account password."""
    if not verify_password(update_data.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    if not is_strong_password(update_data.new_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=WEAK_PASSWORD_MESSAGE)

    current_user.hashed_password = get_password_hash(update_data.new_password)
    db.commit()
    return {"status": "ok"}


@router.get("/admin-setup")
async def admin_setup_status(db: Session = Depends(get_db)):
    """Tell the front end whether the first admin still needs to be created."""
    admin_exists = db.query(UserRole).filter(UserRole.role == "admin").first() is not None
    return {"admin_exists": admin_exists, "setup_enabled": ADMIN_SETUP_ENABLED and not admin_exists}


@router.post("/admin-setup", response_model=UserResponse)
async def admin_setup(request: AdminSetupRequest, db: Session = Depends(get_db)):
    """Create the first admin account."""
    if not ADMIN_SETUP_ENABLED:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin setup is disabled")

    if db.query(UserRole).filter(UserRole.role == "admin").first():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="An admin account already exists")

    if request.password != request.confirm_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Passwords do not match")

    if len(request.password) < 8:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Password must be at least 8 characters",
        )

    email = request.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is already registered")

    user = _create_account(db, email, request.password, request.name.strip(), role="admin")
    logger.info("[Auth] Admin account created: %s", user.id)
    return user_response(user)

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.core.security import hash_password, verify_password, create_access_token
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.core.rate_limit import rate_limit
from prospectflow.schemas.auth import (
    SignupRequest,
    SignupResponse,
    TokenResponse,
    UserProfile,
    ProfileUpdate,
)
from prospectflow.services.settings_service import ensure_default_settings
from prospectflow.services.subscription_service import ensure_free_subscription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ USER SIGNUP
@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=SignupResponse,
    dependencies=[Depends(rate_limit("signup", max_requests=5, window_seconds=60))],
)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    email = str(data.email).lower()
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    try:
        user = User(
            full_name=data.full_name.strip(),
            email=email,
            password_hash=hash_password(data.password),
        )
        db.add(user)
        db.flush()

        # ✅ Every account starts with default settings and the free plan
        ensure_default_settings(db, user.id)
        ensure_free_subscription(db, user.id)

        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        logger.error(f"Signup failed for {email}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account"
        )

    logger.info(f"User signed up: user_id={user.id}")
    return SignupResponse(message="User created successfully", user_id=user.id)


# ✅ OAUTH2 LOGIN FOR SWAGGER + JWT
@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(rate_limit("login", max_requests=10, window_seconds=60))],
)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # Swagger sends "username", but we treat it as email
    user = db.query(User).filter(User.email == form_data.username.strip().lower()).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token({"sub": user.email})

    return TokenResponse(access_token=token, token_type="bearer")


# ✅ PROFILE
@router.get("/me", response_model=UserProfile)
def get_me(user: User = Depends(get_current_user_obj)):
    return UserProfile.model_validate(user)


@router.put("/me", response_model=UserProfile)
def update_me(
    data: ProfileUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    user.full_name = data.full_name
    db.commit()
    db.refresh(user)
    logger.info(f"Updated profile for user_id={user.id}")
    return UserProfile.model_validate(user)

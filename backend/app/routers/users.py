"""Users 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.user import UserCreate, UserInvitationOut, UserInvite, UserOut, UserUpdate
from app.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserOut)
def register_user(data: UserCreate, db: Session = Depends(get_db)):
    return user_service.register_user(db, data)


@router.post("/invitations", response_model=UserInvitationOut)
def invite_user(
    data: UserInvite,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user, mail_sent = user_service.invite_user(db, data, current_user)
    return UserInvitationOut.model_validate(user).model_copy(update={"mail_sent": mail_sent})


@router.patch("/me", response_model=UserOut)
def update_me(
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, current_user, data)

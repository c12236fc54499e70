from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from loguru import logger

from ..core.database import get_db
from ..core.dependencies import get_current_trainer
from ..core.exceptions import BadRequest, InvalidCredentials
from ..core.security import TRAINER_COOKIE_NAME, issue_token, set_session_cookie, verify_password
from ..models.member import MemberCreate, MemberResponse, MemberUpdate
from ..models.orm import Trainer
from ..models.token import TRAINER, TokenPayload
from ..models.trainer import TrainerLoginResponse, TrainerResponse
from ..models.user import LoginCredentials
from .admin import create_notification
from .members import create_member, delete_member, get_member_or_404, list_members, update_member

router = APIRouter(prefix="/api/trainers", tags=["trainer portal"])


def _require_id(id: Optional[str]) -> str:
    if not id:
        raise BadRequest("Member id required")
    return id


@router.post("/auth", response_model=TrainerLoginResponse)
async def trainer_login(credentials: LoginCredentials, response: Response, db: Session = Depends(get_db)):
    """
    Trainer login; sets the trainer-token session cookie
    """
    trainer = (
        db.query(Trainer)
        .filter(Trainer.email == credentials.email, Trainer.is_active.is_(True))
        .first()
    )

    if not trainer or not verify_password(credentials.password, trainer.password_hash):
        logger.warning(f"Failed trainer login attempt for: {credentials.email}")
        raise InvalidCredentials()

    token = issue_token(TokenPayload(user_id=trainer.id, email=trainer.email, role=TRAINER, name=trainer.name))
    set_session_cookie(response, TRAINER_COOKIE_NAME, token)

    logger.info(f"Trainer logged in: {trainer.email}")
    return TrainerLoginResponse(trainer=TrainerResponse.model_validate(trainer), token=token)


@router.get("/members", response_model=List[MemberResponse])
async def trainer_list_members(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    trainer: TokenPayload = Depends(get_current_trainer)
):
    """
    List all members (trainer access)
    """
    return list_members(db, search)


@router.post("/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def trainer_add_member(
    member_in: MemberCreate,
    db: Session = Depends(get_db),
    trainer: TokenPayload = Depends(get_current_trainer)
):
    """
    Create a member and notify the admin
    """
    member = create_member(db, member_in)
    create_notification(db, "member_added", trainer.user_id, trainer.name, member.id, member.name)
    return member


@router.put("/members", response_model=MemberResponse)
async def trainer_update_member(
    member_in: MemberUpdate,
    id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    trainer: TokenPayload = Depends(get_current_trainer)
):
    """
    Update a member and notify the admin
    """
    member = update_member(db, get_member_or_404(db, _require_id(id)), member_in)
    create_notification(db, "member_updated", trainer.user_id, trainer.name, member.id, member.name)
    return member


@router.delete("/members")
async def trainer_delete_member(
    id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    trainer: TokenPayload = Depends(get_current_trainer)
):
    """
    Delete a member and notify the admin
    """
    member_id = _require_id(id)
    member = get_member_or_404(db, member_id)
    member_name = member.name

    delete_member(db, member)
    create_notification(db, "member_deleted", trainer.user_id, trainer.name, member_id, member_name)
    return {"success": True}

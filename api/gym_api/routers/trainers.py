from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from loguru import logger

from ..core.database import get_db
from ..core.dependencies import verify_admin_role
from ..core.exceptions import BadRequest, ResourceNotFound
from ..core.security import get_password_hash
from ..models.orm import Trainer
from ..models.token import TokenPayload
from ..models.trainer import TrainerCreate, TrainerResponse, TrainerUpdate

router = APIRouter(prefix="/api/trainers", tags=["trainers"], responses={
    status.HTTP_401_UNAUTHORIZED: {"description": "Unauthorized"},
    status.HTTP_403_FORBIDDEN: {"description": "Forbidden - Admin access required"},
})

# Explicit null clears these; the other columns are NOT NULL
CLEARABLE_FIELDS = ("phone", "specialization")


def _ensure_email_free(db: Session, email: str, exclude_id: str = None):
    query = db.query(Trainer).filter(Trainer.email == email)
    if exclude_id:
        query = query.filter(Trainer.id != exclude_id)
    if query.first():
        logger.warning(f"Trainer email already in use: {email}")
        raise BadRequest("Email already registered")


def _get_trainer_or_404(db: Session, trainer_id: str) -> Trainer:
    trainer = db.get(Trainer, trainer_id)
    if trainer is None:
        raise ResourceNotFound("Trainer")
    return trainer


@router.get("", response_model=List[TrainerResponse])
async def get_trainers(
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    List trainers (admin only)
    """
    return db.query(Trainer).order_by(Trainer.created_at.desc()).all()


@router.post("", response_model=TrainerResponse, status_code=status.HTTP_201_CREATED)
async def create_trainer(
    trainer_in: TrainerCreate,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Create a trainer account (admin only)
    """
    _ensure_email_free(db, trainer_in.email)

    data = trainer_in.model_dump(exclude={"password"})
    trainer = Trainer(**data, password_hash=get_password_hash(trainer_in.password))
    db.add(trainer)
    db.commit()
    db.refresh(trainer)

    logger.info(f"Admin {admin_user.email} created trainer {trainer.email}")
    return trainer


@router.put("/{trainer_id}", response_model=TrainerResponse)
async def update_trainer(
    trainer_id: str,
    trainer_in: TrainerUpdate,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Update a trainer account (admin only)
    """
    trainer = _get_trainer_or_404(db, trainer_id)
    changes = trainer_in.model_dump(exclude_unset=True)

    if changes.get("email") and changes["email"] != trainer.email:
        _ensure_email_free(db, changes["email"], exclude_id=trainer.id)

    password = changes.pop("password", None)
    if password:
        trainer.password_hash = get_password_hash(password)

    for field, value in changes.items():
        if value is not None or field in CLEARABLE_FIELDS:
            setattr(trainer, field, value)

    db.commit()
    db.refresh(trainer)

    logger.info(f"Admin {admin_user.email} updated trainer {trainer.email}")
    return trainer


@router.delete("/{trainer_id}")
async def delete_trainer(
    trainer_id: str,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Delete a trainer account (admin only)
    """
    trainer = _get_trainer_or_404(db, trainer_id)
    db.delete(trainer)
    db.commit()

    logger.info(f"Admin {admin_user.email} deleted trainer {trainer_id}")
    return {"success": True}

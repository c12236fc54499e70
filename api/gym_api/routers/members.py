from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional
from loguru import logger

from ..core.database import get_db
from ..core.dependencies import verify_admin_role
from ..core.exceptions import ResourceNotFound
from ..models.member import MemberCreate, MemberResponse, MemberUpdate
from ..models.orm import Member, utcnow
from ..models.token import TokenPayload

router = APIRouter(prefix="/api/members", tags=["members"], responses={
    status.HTTP_401_UNAUTHORIZED: {"description": "Unauthorized"},
    status.HTTP_403_FORBIDDEN: {"description": "Forbidden - Admin access required"},
})


def list_members(db: Session, search: Optional[str] = None, member_status: Optional[str] = None) -> List[Member]:
    """Members newest first, optionally filtered by text and active/expired status"""
    query = db.query(Member)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Member.name.ilike(pattern),
            Member.email.ilike(pattern),
            Member.phone.ilike(pattern)
        ))

    now = utcnow()
    if member_status == "active":
        query = query.filter(or_(Member.end_date.is_(None), Member.end_date >= now))
    elif member_status == "expired":
        query = query.filter(Member.end_date < now)

    return query.order_by(Member.created_at.desc()).all()


def get_member_or_404(db: Session, member_id: str) -> Member:
    member = db.get(Member, member_id)
    if member is None:
        raise ResourceNotFound("Member")
    return member


def create_member(db: Session, data: MemberCreate) -> Member:
    member = Member(**data.model_dump())
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def update_member(db: Session, member: Member, data: MemberUpdate) -> Member:
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(member, field, value)
    db.commit()
    db.refresh(member)
    return member


def delete_member(db: Session, member: Member) -> None:
    db.delete(member)
    db.commit()


@router.get("", response_model=List[MemberResponse])
async def get_members(
    search: Optional[str] = None,
    member_status: Optional[str] = Query(None, alias="status", pattern="^(active|expired)$"),
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    List members (admin only)
    """
    return list_members(db, search, member_status)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    member_in: MemberCreate,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Create a member (admin only)
    """
    member = create_member(db, member_in)
    logger.info(f"Admin {admin_user.email} created member {member.id}")
    return member


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: str,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    return get_member_or_404(db, member_id)


@router.put("/{member_id}", response_model=MemberResponse)
async def edit_member(
    member_id: str,
    member_in: MemberUpdate,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Update a member (admin only)
    """
    member = update_member(db, get_member_or_404(db, member_id), member_in)
    logger.info(f"Admin {admin_user.email} updated member {member.id}")
    return member


@router.delete("/{member_id}")
async def remove_member(
    member_id: str,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Delete a member (admin only)
    """
    delete_member(db, get_member_or_404(db, member_id))
    logger.info(f"Admin {admin_user.email} deleted member {member_id}")
    return {"success": True}

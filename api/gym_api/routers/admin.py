from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional
from loguru import logger
import pandas as pd

from ..core.database import get_db, query_to_dataframe
from ..core.dependencies import verify_admin_role
from ..core.exceptions import BadRequest, ResourceNotFound
from ..models.notification import NotificationListResponse, NotificationResponse, NotificationUpdate
from ..models.orm import Notification, utcnow
from ..models.token import TokenPayload

router = APIRouter(prefix="/api/admin", tags=["admin"], responses={
    status.HTTP_401_UNAUTHORIZED: {"description": "Unauthorized"},
    status.HTTP_403_FORBIDDEN: {"description": "Forbidden - Admin access required"},
})

NOTIFICATION_MESSAGES = {
    "member_added": "{trainer_name} added a new member: {member_name}",
    "member_updated": "{trainer_name} updated member: {member_name}",
    "member_deleted": "{trainer_name} deleted member: {member_name}",
}


def create_notification(
    db: Session,
    notification_type: str,
    trainer_id: str,
    trainer_name: str,
    member_id: Optional[str] = None,
    member_name: Optional[str] = None
) -> Optional[Notification]:
    """
    Record a trainer action for the admin feed.

    A failed write is logged and swallowed so the trainer's own operation,
    already committed, still succeeds.
    """
    notification = Notification(
        type=notification_type,
        message=NOTIFICATION_MESSAGES[notification_type].format(trainer_name=trainer_name, member_name=member_name),
        trainer_id=trainer_id,
        trainer_name=trainer_name,
        member_id=member_id,
        member_name=member_name
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.bind(type=notification_type, trainer_id=trainer_id).error(f"Error saving notification: {e}")
        return None

    logger.info(f"Notification saved: {notification.message}")
    return notification


def compute_member_stats(members: pd.DataFrame, now) -> dict:
    """Dashboard figures from a members frame (end_date, start_date, amount_paid)"""
    if members.empty:
        return {
            "total_members": 0,
            "active_members": 0,
            "expired_members": 0,
            "total_revenue": 0.0,
            "monthly_revenue": 0.0,
        }

    end_dates = pd.to_datetime(members["end_date"])
    start_dates = pd.to_datetime(members["start_date"])
    amounts = pd.to_numeric(members["amount_paid"]).fillna(0.0)

    expired = end_dates.notna() & (end_dates < now)
    this_month = (start_dates.dt.year == now.year) & (start_dates.dt.month == now.month)

    return {
        "total_members": int(len(members)),
        "active_members": int((~expired).sum()),
        "expired_members": int(expired.sum()),
        "total_revenue": float(amounts.sum()),
        "monthly_revenue": float(amounts[this_month].sum()),
    }


@router.get("/stats")
async def get_admin_stats(
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Get dashboard statistics (admin only)
    """
    logger.info(f"Admin {admin_user.email} requested admin stats")

    members = query_to_dataframe(db, "SELECT start_date, end_date, amount_paid FROM members")
    trainers = query_to_dataframe(db, "SELECT COUNT(*) AS count FROM trainers WHERE is_active = :active", {"active": True})

    stats = compute_member_stats(members, pd.Timestamp(utcnow()))
    stats["total_trainers"] = int(trainers["count"].iloc[0]) if not trainers.empty else 0
    return stats


@router.get("/notifications", response_model=NotificationListResponse)
async def get_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    List trainer activity notifications, newest first (admin only)
    """
    query = db.query(Notification)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))

    notifications = query.order_by(Notification.created_at.desc()).all()
    unread_count = db.query(Notification).filter(Notification.is_read.is_(False)).count()

    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=unread_count
    )


@router.patch("/notifications")
async def mark_notifications_read(
    update: NotificationUpdate,
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Mark one notification, or all of them, as read (admin only)
    """
    if update.all:
        updated = (
            db.query(Notification)
            .filter(Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return {"success": True, "updated": updated}

    if not update.id:
        raise BadRequest("Notification id required")

    notification = db.get(Notification, update.id)
    if notification is None:
        raise ResourceNotFound("Notification")

    notification.is_read = True
    db.commit()
    return {"success": True, "updated": 1}


@router.delete("/notifications")
async def delete_notification(
    id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    admin_user: TokenPayload = Depends(verify_admin_role)
):
    """
    Delete a notification (admin only)
    """
    notification = db.get(Notification, id)
    if notification is None:
        raise ResourceNotFound("Notification")

    db.delete(notification)
    db.commit()
    logger.info(f"Admin {admin_user.email} deleted notification {id}")
    return {"success": True}

# alagad_depot/routers/notifications.py
from fastapi import APIRouter, Depends, HTTPException

from alagad_depot.deps import get_feed
from alagad_depot.schemas import NotificationFeedOut
from alagad_depot.services.notifications import NotificationFeed

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

@router.get("", response_model=NotificationFeedOut)
def list_notifications(feed: NotificationFeed = Depends(get_feed)):
    return NotificationFeedOut(unread=feed.unread_count, items=feed.items)

@router.post("/read-all")
def mark_all_read(feed: NotificationFeed = Depends(get_feed)):
    return {"ok": True, "marked": feed.mark_all_read()}

@router.post("/{notification_id}/read")
def mark_read(notification_id: str, feed: NotificationFeed = Depends(get_feed)):
    if not feed.mark_read(notification_id):
        raise HTTPException(404, "Notification not found")
    return {"ok": True, "unread": feed.unread_count}

from typing import List

from fastapi import APIRouter, Depends

from src.inside_notes.domain.models.notification import Notification
from src.inside_notes.security import get_api_key
from src.inside_notes.services.notifications.service import notification_center

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(get_api_key)],
)


@router.get("", response_model=List[Notification])
async def list_notifications() -> List[Notification]:
    """Notifications that have not been auto-dismissed yet, oldest first."""
    return notification_center.active()

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List
import logging

from leaders.db.session import get_db
from leaders.auth.dependencies import get_current_user
from leaders.auth.models import Role, User
from leaders.auth.permissions import require_role
from leaders.events.models import EventMode
from leaders.events.services import (
    EventService, EventNotFoundError, EventPermissionError, serialize_event
)
from .schemas import EventCreate, EventUpdate, EventResponse, RegistrationResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["events"])

can_manage_events = require_role(Role.ADMIN, Role.INSTRUCTOR)


# ===============================
# GET EVENTS
# ===============================
@router.get("", response_model=List[EventResponse])
async def get_events(
    upcoming: bool = Query(False, description="Only future events"),
    mode: Optional[EventMode] = Query(None, description="Filter by mode"),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    events = await EventService(db).get_events(upcoming=upcoming, mode=mode.value if mode else None)
    return [serialize_event(e) for e in events]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    try:
        event = await EventService(db).get_event(event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    return serialize_event(event)


# ===============================
# EVENT CREATION / EDITION
# ===============================
@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: EventCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(can_manage_events),
):
    try:
        db_event = await EventService(db).create_event(event, current_user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error creating event:")
        raise HTTPException(status_code=500, detail="Internal error while creating the event")
    return serialize_event(db_event)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    updates: EventUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(can_manage_events),
):
    try:
        db_event = await EventService(db).update_event(event_id, updates, current_user)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except EventPermissionError:
        raise HTTPException(status_code=403, detail="Forbidden")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error updating event:")
        raise HTTPException(status_code=500, detail="Internal error while updating the event")
    return serialize_event(db_event)


@router.delete("/{event_id}")
async def delete_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(can_manage_events),
):
    try:
        await EventService(db).delete_event(event_id, current_user)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except EventPermissionError:
        raise HTTPException(status_code=403, detail="Forbidden")
    return {"message": "Event deleted successfully"}


# ===============================
# REGISTRATION
# ===============================
@router.post("/{event_id}/register", response_model=RegistrationResponse)
async def register_for_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        await EventService(db).register(event_id, current_user.id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    return {
        "message": "Registered for event successfully",
        "event_id": event_id,
        "user_id": current_user.id,
        "registered": True,
    }


@router.delete("/{event_id}/register", response_model=RegistrationResponse)
async def unregister_from_event(
    event_id: int,
    user_id: Optional[int] = Query(None, description="Admin only: user to unregister"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    target_id = user_id if user_id is not None else current_user.id
    if target_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")

    try:
        await EventService(db).unregister(event_id, target_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    return {
        "message": "Unregistered from event successfully",
        "event_id": event_id,
        "user_id": target_id,
        "registered": False,
    }

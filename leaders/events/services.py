import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.models import User
from leaders.events.models import Event, EventRegistration
from leaders.events.schemas import EventCreate, EventUpdate

logger = logging.getLogger(__name__)


class EventNotFoundError(Exception):
    pass


class EventPermissionError(Exception):
    pass


def serialize_event(event: Event) -> dict:
    instructor = event.instructor
    registrations = [r.user_id for r in event.registrations]
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "date": event.date,
        "mode": event.mode,
        "location": event.location,
        "instructor_id": event.instructor_id,
        "instructor_first_name": instructor.first_name if instructor else None,
        "instructor_last_name": instructor.last_name if instructor else None,
        "created_at": event.created_at,
        "registrations": registrations,
        "registration_count": len(registrations),
    }


class EventService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_event(self, event_id: int) -> Event:
        result = await self.db.execute(
            select(Event)
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalars().unique().first()
        if not event:
            raise EventNotFoundError(f"Event {event_id} not found")
        return event

    async def get_events(self, upcoming: bool = False, mode: Optional[str] = None) -> List[Event]:
        query = select(Event).order_by(Event.date.asc(), Event.id.asc())
        if upcoming:
            query = query.where(Event.date >= datetime.utcnow())
        if mode:
            query = query.where(Event.mode == mode)

        result = await self.db.execute(query)
        events = result.scalars().unique().all()
        logger.debug(f"Returned events count: {len(events)}")
        return list(events)

    async def _resolve_instructor(self, requested_id: Optional[int], current_user: User, fallback_id: Optional[int]) -> Optional[int]:
        """Seul un Admin peut choisir l'intervenant ; un Instructeur reste intervenant de ses événements"""
        if not current_user.is_admin or requested_id is None:
            return fallback_id
        if not await self.db.get(User, requested_id):
            raise ValueError(f"Instructor {requested_id} not found")
        return requested_id

    def _check_can_edit(self, event: Event, current_user: User) -> None:
        if not current_user.is_admin and event.instructor_id != current_user.id:
            raise EventPermissionError("Forbidden")

    async def create_event(self, event_data: EventCreate, current_user: User) -> Event:
        instructor_id = await self._resolve_instructor(event_data.instructor_id, current_user, current_user.id)

        db_event = Event(
            title=event_data.title,
            description=event_data.description,
            date=event_data.date,
            mode=event_data.mode.value,
            location=event_data.location,
            instructor_id=instructor_id,
        )
        self.db.add(db_event)
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating event: {e}")
            raise

        logger.info(f"Event created: id={db_event.id}, title={db_event.title}, by user {current_user.id}")
        return await self.get_event(db_event.id)

    async def update_event(self, event_id: int, updates: EventUpdate, current_user: User) -> Event:
        event = await self.get_event(event_id)
        self._check_can_edit(event, current_user)

        data = updates.model_dump(exclude_unset=True)
        if "instructor_id" in data:
            requested_instructor = data.pop("instructor_id")
            if requested_instructor is None:
                # null explicite : un Admin retire l'intervenant
                if current_user.is_admin:
                    event.instructor_id = None
            else:
                event.instructor_id = await self._resolve_instructor(
                    requested_instructor, current_user, event.instructor_id
                )

        for field, value in data.items():
            if field == "mode" and value is not None:
                value = value.value
            if field in ("title", "date", "mode") and value is None:
                continue
            setattr(event, field, value)

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error updating event {event_id}: {e}")
            raise

        logger.info(f"Event updated: id={event_id} by user {current_user.id}")
        return await self.get_event(event_id)

    async def delete_event(self, event_id: int, current_user: User) -> None:
        event = await self.get_event(event_id)
        self._check_can_edit(event, current_user)

        # Les inscriptions suivent l'événement (cascade delete-orphan)
        await self.db.delete(event)
        await self.db.commit()
        logger.info(f"Event deleted: id={event_id} by user {current_user.id}")

    async def register(self, event_id: int, user_id: int) -> None:
        """Inscription idempotente"""
        await self.get_event(event_id)

        existing = await self.db.execute(
            select(EventRegistration).where(
                EventRegistration.event_id == event_id,
                EventRegistration.user_id == user_id,
            )
        )
        if existing.scalars().first():
            return

        self.db.add(EventRegistration(event_id=event_id, user_id=user_id))
        try:
            await self.db.commit()
        except IntegrityError:
            # Inscription concurrente déjà présente
            await self.db.rollback()
            return
        logger.info(f"User {user_id} registered to event {event_id}")

    async def unregister(self, event_id: int, user_id: int) -> None:
        await self.get_event(event_id)
        await self.db.execute(
            delete(EventRegistration).where(
                EventRegistration.event_id == event_id,
                EventRegistration.user_id == user_id,
            )
        )
        await self.db.commit()
        logger.info(f"User {user_id} unregistered from event {event_id}")

# ===== detailing/services/availability/availability_service.py =====
"""
Availability checking and schedule management.

A slot is bookable when, in order:
1. the business is open on that weekday,
2. the slot lies wholly inside the weekday's business hours,
3. it does not overlap any time block on that date,
4. it does not overlap any non-cancelled appointment on that date.

Intervals are half-open, so back-to-back bookings (one ending at 10:00, the
next starting at 10:00) do not conflict.
"""
from typing import List, Dict, Optional, Any
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from detailing.config.settings import get_settings
from detailing.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from detailing.models.appointment import Appointment
from detailing.models.availability import BusinessHours, TimeBlock
from detailing.models.user import User
from detailing.utils.time_utils import (
    day_of_week,
    format_display_time,
    intervals_overlap,
    minutes_to_time,
    parse_date,
    time_to_minutes,
)

logger = logging.getLogger(__name__)
settings = get_settings()

TIME_BLOCK_TYPES = ("time_off", "maintenance", "other")


def _require_admin(user: User, action: str) -> None:
    if not user.is_admin():
        logger.warning(f"User {user.id} attempted to {action} without admin role")
        raise AccessDeniedError("Admin access required")


class AvailabilityService:
    """Slot checks against business hours, time blocks and booked appointments"""

    @staticmethod
    def get_business_hours_for_day(db: Session, dow: int, lock: bool = False) -> Optional[BusinessHours]:
        query = db.query(BusinessHours).filter(
            BusinessHours.day_of_week == dow,
            BusinessHours.is_active.is_(True)
        )
        if lock:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def check_availability(
            db: Session,
            date: str,
            start_time: str,
            duration: int,
            exclude_appointment_id: Optional[UUID] = None
    ) -> Dict[str, Any]:
        """
        Check whether [start_time, start_time + duration) on `date` can be booked.

        Returns:
            {"available": bool, "reason": str | None}
        """
        date_str = parse_date(date).isoformat()
        requested_start = time_to_minutes(start_time)
        if duration is None or duration <= 0:
            raise ValidationError("Duration must be a positive number of minutes")
        requested_end = requested_start + duration

        hours = AvailabilityService.get_business_hours_for_day(db, day_of_week(date_str))
        if not hours:
            return {"available": False, "reason": "Business closed on this day"}

        if (requested_start < time_to_minutes(hours.start_time)
                or requested_end > time_to_minutes(hours.end_time)):
            return {"available": False, "reason": "Outside business hours"}

        blocks = db.query(TimeBlock).filter(TimeBlock.date == date_str).all()
        for block in blocks:
            if intervals_overlap(requested_start, requested_end,
                                 time_to_minutes(block.start_time), time_to_minutes(block.end_time)):
                return {"available": False, "reason": f"Time blocked: {block.reason}"}

        query = db.query(Appointment).filter(
            Appointment.scheduled_date == date_str,
            Appointment.status != "cancelled"
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)

        for appointment in query.all():
            appointment_start = time_to_minutes(appointment.scheduled_time)
            appointment_end = appointment_start + appointment.duration
            if intervals_overlap(requested_start, requested_end, appointment_start, appointment_end):
                return {"available": False, "reason": "Time slot already booked"}

        return {"available": True, "reason": None}

    @staticmethod
    def get_available_time_slots(db: Session, date: str) -> List[Dict[str, Any]]:
        """
        Build the booking grid for one day.

        Slots start every SLOT_INTERVAL_MINUTES from opening time and are each
        checked as a SLOT_BLOCK_MINUTES block, regardless of the service picked.
        """
        date_str = parse_date(date).isoformat()
        hours = AvailabilityService.get_business_hours_for_day(db, day_of_week(date_str))
        if not hours:
            return []

        block = settings.SLOT_BLOCK_MINUTES
        slots = []
        minutes = time_to_minutes(hours.start_time)
        end_minutes = time_to_minutes(hours.end_time)

        while minutes < end_minutes:
            time_str = minutes_to_time(minutes)
            availability = AvailabilityService.check_availability(db, date_str, time_str, block)
            slots.append({
                "time": time_str,
                "display_time": format_display_time(time_str),
                "available": availability["available"],
                "reason": availability["reason"],
            })
            minutes += settings.SLOT_INTERVAL_MINUTES

        return slots


class ScheduleService:
    """Administrative changes to business hours and time blocks"""

    @staticmethod
    def get_business_hours(db: Session) -> List[BusinessHours]:
        return db.query(BusinessHours).filter(
            BusinessHours.is_active.is_(True)
        ).order_by(BusinessHours.day_of_week.asc()).all()

    @staticmethod
    def set_business_hours(db: Session, schedule: List[Dict[str, Any]], user: User) -> List[BusinessHours]:
        """
        Make the stored weekly schedule equal to `schedule`.

        Rows are upserted by day_of_week and weekdays missing from the payload
        are deleted, all in one commit, so readers never see an empty week.
        """
        _require_admin(user, "set business hours")

        by_day = {}
        for day in schedule:
            dow = day["day_of_week"]
            if dow in by_day:
                raise ValidationError(f"Duplicate entry for day_of_week {dow}")
            if not 0 <= dow <= 6:
                raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
            if day.get("is_active", True) and time_to_minutes(day["end_time"]) <= time_to_minutes(day["start_time"]):
                raise ValidationError(f"end_time must be after start_time for day_of_week {dow}")
            by_day[dow] = day

        existing = {row.day_of_week: row for row in db.query(BusinessHours).with_for_update().all()}

        for dow, row in existing.items():
            if dow not in by_day:
                db.delete(row)

        for dow, day in by_day.items():
            row = existing.get(dow)
            if row is None:
                row = BusinessHours(day_of_week=dow)
                db.add(row)
            row.start_time = day["start_time"]
            row.end_time = day["end_time"]
            row.is_active = day.get("is_active", True)

        db.commit()
        logger.info(f"Business hours replaced by {user.id}: {sorted(by_day)} active days configured")

        return db.query(BusinessHours).order_by(BusinessHours.day_of_week.asc()).all()

    @staticmethod
    def add_time_block(
            db: Session,
            date: str,
            start_time: str,
            end_time: str,
            reason: str,
            type: str,
            user: User
    ) -> Dict[str, Any]:
        """
        Append a time block. Existing appointments are not re-validated; any
        booked appointment the block overlaps is reported back to the caller.
        """
        _require_admin(user, "add a time block")

        date_str = parse_date(date).isoformat()
        block_start = time_to_minutes(start_time)
        block_end = time_to_minutes(end_time)
        if block_end <= block_start:
            raise ValidationError("end_time must be after start_time")
        if type not in TIME_BLOCK_TYPES:
            raise ValidationError(f"type must be one of {', '.join(TIME_BLOCK_TYPES)}")

        block = TimeBlock(
            date=date_str,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
            type=type,
            created_by=user.id,
        )
        db.add(block)
        db.commit()
        db.refresh(block)

        booked = db.query(Appointment).filter(
            Appointment.scheduled_date == date_str,
            Appointment.status != "cancelled"
        ).all()
        conflicts = [
            str(appt.id) for appt in booked
            if intervals_overlap(block_start, block_end,
                                 time_to_minutes(appt.scheduled_time),
                                 time_to_minutes(appt.scheduled_time) + appt.duration)
        ]

        if conflicts:
            logger.warning(f"Time block {block.id} on {date_str} overlaps booked appointments: {conflicts}")
        logger.info(f"Time block added on {date_str} {start_time}-{end_time} ({type}) by {user.id}")

        return {"block": block, "conflicting_appointment_ids": conflicts}

    @staticmethod
    def get_blocked_times(db: Session, start_date: str, end_date: str) -> List[TimeBlock]:
        start = parse_date(start_date).isoformat()
        end = parse_date(end_date).isoformat()
        if end < start:
            raise ValidationError("end_date must not be before start_date")

        return db.query(TimeBlock).filter(
            TimeBlock.date >= start,
            TimeBlock.date <= end
        ).order_by(TimeBlock.date.asc(), TimeBlock.start_time.asc()).all()

    @staticmethod
    def delete_time_block(db: Session, block_id: UUID, user: User) -> None:
        _require_admin(user, "delete a time block")

        block = db.query(TimeBlock).filter(TimeBlock.id == block_id).first()
        if not block:
            raise NotFoundError("Time block not found")

        db.delete(block)
        db.commit()
        logger.info(f"Time block {block_id} deleted by {user.id}")


def serialize_business_hours(hours: BusinessHours) -> Dict[str, Any]:
    return {
        "day_of_week": hours.day_of_week,
        "start_time": hours.start_time,
        "end_time": hours.end_time,
        "is_active": hours.is_active,
    }


def serialize_time_block(block: TimeBlock) -> Dict[str, Any]:
    return {
        "id": str(block.id),
        "date": block.date,
        "start_time": block.start_time,
        "end_time": block.end_time,
        "reason": block.reason,
        "type": block.type,
        "created_by": str(block.created_by),
    }

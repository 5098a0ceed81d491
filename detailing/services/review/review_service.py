# ===== detailing/services/review/review_service.py =====
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from detailing.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from detailing.models.appointment import Appointment
from detailing.models.review import Review
from detailing.models.user import User
from detailing.services.notification.notification_service import NotificationService

logger = logging.getLogger(__name__)

NEW_REVIEW_WINDOW_DAYS = 7


class ReviewService:
    """Customer reviews of completed appointments"""

    @staticmethod
    def submit_review(
            db: Session,
            appointment_id: UUID,
            rating: int,
            user: User,
            comment: Optional[str] = None,
            is_public: bool = True
    ) -> Review:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("Rating must be an integer between 1 and 5")

        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        if not user.is_admin() and appointment.user_id != user.id:
            raise AccessDeniedError()
        if appointment.status != "completed":
            raise ValidationError("Only completed appointments can be reviewed")

        # Uniqueness is checked here only; there is no database constraint
        existing = db.query(Review).filter(Review.appointment_id == appointment.id).first()
        if existing:
            raise ValidationError("A review already exists for this appointment")

        review = Review(
            user_id=appointment.user_id,
            appointment_id=appointment.id,
            rating=rating,
            comment=comment,
            is_public=is_public,
            review_date=datetime.now(timezone.utc).isoformat(),
        )
        db.add(review)
        db.commit()
        db.refresh(review)

        logger.info(f"Review {review.id} ({rating} stars) submitted for appointment {appointment.id}")

        customer = db.query(User).filter(User.id == appointment.user_id).first()
        NotificationService.review_submitted(review, customer)
        return review

    @staticmethod
    def list_reviews(db: Session, is_public: Optional[bool] = None) -> List[Review]:
        query = db.query(Review)
        if is_public is not None:
            query = query.filter(Review.is_public.is_(is_public))
        return query.order_by(Review.review_date.desc()).all()

    @staticmethod
    def list_for_admin(db: Session) -> List[Dict[str, Any]]:
        """All reviews, newest first, with customer and appointment details."""
        rows = db.query(Review, User, Appointment).outerjoin(
            User, User.id == Review.user_id
        ).outerjoin(
            Appointment, Appointment.id == Review.appointment_id
        ).order_by(Review.review_date.desc()).all()

        results = []
        for review, customer, appointment in rows:
            data = ReviewService.serialize(review)
            data["customer_name"] = customer.name if customer else None
            data["customer_email"] = customer.email if customer else None
            data["appointment_date"] = appointment.scheduled_date if appointment else None
            results.append(data)
        return results

    @staticmethod
    def get_by_user(db: Session, user_id: UUID, user: User) -> List[Review]:
        if not user.is_admin() and user.id != user_id:
            raise AccessDeniedError()
        return db.query(Review).filter(Review.user_id == user_id).order_by(Review.review_date.desc()).all()

    @staticmethod
    def get_pending_reviews(db: Session, user: User) -> List[Appointment]:
        """Completed appointments of `user` that have not been reviewed yet."""
        reviewed = select(Review.appointment_id).where(Review.user_id == user.id)
        return db.query(Appointment).filter(
            Appointment.user_id == user.id,
            Appointment.status == "completed",
            Appointment.id.notin_(reviewed)
        ).order_by(Appointment.scheduled_date.desc()).all()

    @staticmethod
    def get_new_reviews_count(db: Session, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        cutoff = (now - timedelta(days=NEW_REVIEW_WINDOW_DAYS)).isoformat()
        return db.query(Review).filter(Review.review_date >= cutoff).count()

    @staticmethod
    def serialize(review: Review) -> Dict[str, Any]:
        return {
            "id": str(review.id),
            "user_id": str(review.user_id),
            "appointment_id": str(review.appointment_id),
            "rating": review.rating,
            "comment": review.comment,
            "is_public": review.is_public,
            "review_date": review.review_date,
        }

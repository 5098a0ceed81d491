# ============================================================================
# detailing/services/catalog/catalog_service.py
# Services catalog, customer vehicles and deposit settings
# ============================================================================
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from detailing.config.settings import get_settings
from detailing.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from detailing.models.deposit_settings import DepositSettings
from detailing.models.service import Service, ServiceCategory
from detailing.models.user import User
from detailing.models.vehicle import Vehicle

logger = logging.getLogger(__name__)
settings = get_settings()

VEHICLE_SIZES = ("small", "medium", "large")
CATEGORY_TYPES = ("standard", "subscription")

SERVICE_FIELDS = (
    "name", "description", "base_price", "base_price_small", "base_price_medium",
    "base_price_large", "duration", "category_id", "features", "icon", "is_active",
)


class CatalogService:
    """Service layer for the services catalog."""

    @staticmethod
    def list_services(db: Session, active_only: bool = True) -> List[Service]:
        query = db.query(Service)
        if active_only:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.name.asc()).all()

    @staticmethod
    def get_service(db: Session, service_id: UUID) -> Service:
        service = db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise NotFoundError("Service not found")
        return service

    @staticmethod
    def create_service(db: Session, data: Dict[str, Any]) -> Service:
        if not data.get("duration") or data["duration"] <= 0:
            raise ValidationError("duration must be a positive number of minutes")
        if data.get("category_id"):
            CatalogService._get_category(db, data["category_id"])

        service = Service(**{key: value for key, value in data.items() if key in SERVICE_FIELDS})
        db.add(service)
        db.commit()
        db.refresh(service)

        logger.info(f"Service created: {service.name} ({service.id})")
        return service

    @staticmethod
    def update_service(db: Session, service_id: UUID, data: Dict[str, Any]) -> Service:
        """Apply a partial update; keys absent from `data` are left untouched."""
        service = CatalogService.get_service(db, service_id)

        if "duration" in data and (data["duration"] is None or data["duration"] <= 0):
            raise ValidationError("duration must be a positive number of minutes")
        if data.get("category_id"):
            CatalogService._get_category(db, data["category_id"])

        for key, value in data.items():
            if key in SERVICE_FIELDS:
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        logger.info(f"Service updated: {service.name} ({service.id})")
        return service

    @staticmethod
    def _get_category(db: Session, category_id: UUID) -> ServiceCategory:
        category = db.query(ServiceCategory).filter(ServiceCategory.id == category_id).first()
        if not category:
            raise NotFoundError("Service category not found")
        return category

    @staticmethod
    def list_categories(db: Session) -> List[ServiceCategory]:
        return db.query(ServiceCategory).order_by(ServiceCategory.name.asc()).all()

    @staticmethod
    def create_category(db: Session, name: str, type: str = "standard") -> ServiceCategory:
        if type not in CATEGORY_TYPES:
            raise ValidationError(f"type must be one of {', '.join(CATEGORY_TYPES)}")

        category = ServiceCategory(name=name, type=type)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    @staticmethod
    def serialize_service(service: Service) -> Dict[str, Any]:
        return {
            "id": str(service.id),
            "name": service.name,
            "description": service.description,
            "base_price": service.base_price,
            "base_price_small": service.base_price_small,
            "base_price_medium": service.base_price_medium,
            "base_price_large": service.base_price_large,
            "duration": service.duration,
            "category_id": str(service.category_id) if service.category_id else None,
            "features": service.features or [],
            "icon": service.icon,
            "is_active": service.is_active,
        }


class VehicleService:

    @staticmethod
    def list_vehicles(db: Session, user: User) -> List[Vehicle]:
        return db.query(Vehicle).filter(Vehicle.user_id == user.id).all()

    @staticmethod
    def add_vehicle(db: Session, user: User, data: Dict[str, Any]) -> Vehicle:
        size = data.get("size") or "medium"
        if size not in VEHICLE_SIZES:
            raise ValidationError(f"size must be one of {', '.join(VEHICLE_SIZES)}")

        vehicle = Vehicle(
            user_id=user.id,
            year=data["year"],
            make=data["make"],
            model=data["model"],
            size=size,
            color=data.get("color"),
            license_plate=data.get("license_plate"),
            notes=data.get("notes"),
        )
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)

        logger.info(f"Vehicle {vehicle.id} added for user {user.id}")
        return vehicle

    @staticmethod
    def delete_vehicle(db: Session, vehicle_id: UUID, user: User) -> None:
        vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        if not user.is_admin() and vehicle.user_id != user.id:
            raise AccessDeniedError()

        db.delete(vehicle)
        db.commit()

    @staticmethod
    def serialize(vehicle: Vehicle) -> Dict[str, Any]:
        return {
            "id": str(vehicle.id),
            "user_id": str(vehicle.user_id),
            "year": vehicle.year,
            "make": vehicle.make,
            "model": vehicle.model,
            "size": vehicle.size,
            "color": vehicle.color,
            "license_plate": vehicle.license_plate,
            "notes": vehicle.notes,
        }


class DepositSettingsService:

    @staticmethod
    def get(db: Session) -> Dict[str, Any]:
        """Current deposit policy, falling back to the configured default."""
        row = db.query(DepositSettings).first()
        if row is None:
            return {"amount_per_vehicle": settings.DEFAULT_DEPOSIT_PER_VEHICLE, "is_active": True}
        return {"amount_per_vehicle": row.amount_per_vehicle, "is_active": row.is_active}

    @staticmethod
    def upsert(db: Session, amount_per_vehicle: float, is_active: Optional[bool] = None) -> Dict[str, Any]:
        if amount_per_vehicle < 0:
            raise ValidationError("amount_per_vehicle must not be negative")

        row = db.query(DepositSettings).first()
        if row is None:
            row = DepositSettings(amount_per_vehicle=amount_per_vehicle, is_active=True)
            db.add(row)
        row.amount_per_vehicle = amount_per_vehicle
        if is_active is not None:
            row.is_active = is_active

        db.commit()
        logger.info(f"Deposit settings updated: ${amount_per_vehicle:.2f} per vehicle")
        return DepositSettingsService.get(db)

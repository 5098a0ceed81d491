import pytest

from detailing.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from detailing.models import Service
from detailing.services.catalog.catalog_service import CatalogService, DepositSettingsService, VehicleService


def test_price_for_size_fallbacks():
    full = Service(name="Full", base_price=40.0, base_price_small=30.0, base_price_medium=45.0,
                   base_price_large=60.0, duration=60)
    medium_only = Service(name="Medium", base_price=40.0, base_price_medium=45.0, duration=60)
    flat = Service(name="Flat", base_price=40.0, duration=60)

    assert [full.price_for_size(s) for s in ("small", "medium", "large")] == [30.0, 45.0, 60.0]
    assert [medium_only.price_for_size(s) for s in ("small", "medium", "large")] == [45.0, 45.0, 45.0]
    assert [flat.price_for_size(s) for s in ("small", "medium", "large")] == [40.0, 40.0, 40.0]


def test_create_and_update_service(db):
    category = CatalogService.create_category(db, "Packages", "subscription")
    service = CatalogService.create_service(db, {
        "name": "Ceramic Coat",
        "description": "Two-year coating",
        "base_price": 400.0,
        "duration": 240,
        "category_id": category.id,
        "features": ["paint correction"],
    })

    updated = CatalogService.update_service(db, service.id, {"base_price_large": 550.0, "is_active": False})

    assert updated.base_price_large == 550.0
    assert updated.base_price == 400.0
    assert CatalogService.list_services(db) == []
    assert [s.name for s in CatalogService.list_services(db, active_only=False)] == ["Ceramic Coat"]
    assert CatalogService.serialize_service(updated)["category_id"] == str(category.id)


def test_service_validation(db):
    with pytest.raises(ValidationError):
        CatalogService.create_service(db, {"name": "Nothing", "duration": 0})
    with pytest.raises(ValidationError):
        CatalogService.create_category(db, "Bad", "premium")


def test_vehicle_ownership(db, client_user, other_client):
    vehicle = VehicleService.add_vehicle(db, client_user, {"year": 2019, "make": "Mazda", "model": "CX-5"})
    assert vehicle.size == "medium"

    with pytest.raises(AccessDeniedError):
        VehicleService.delete_vehicle(db, vehicle.id, other_client)

    VehicleService.delete_vehicle(db, vehicle.id, client_user)
    assert VehicleService.list_vehicles(db, client_user) == []

    with pytest.raises(NotFoundError):
        VehicleService.delete_vehicle(db, vehicle.id, client_user)


def test_vehicle_size_is_validated(db, client_user):
    with pytest.raises(ValidationError):
        VehicleService.add_vehicle(db, client_user, {"year": 2019, "make": "Mazda", "model": "CX-5", "size": "huge"})


def test_deposit_settings_upsert(db):
    assert DepositSettingsService.get(db)["amount_per_vehicle"] == 50.0

    DepositSettingsService.upsert(db, 25.0)
    result = DepositSettingsService.upsert(db, 30.0, is_active=False)

    assert result == {"amount_per_vehicle": 30.0, "is_active": False}

    with pytest.raises(ValidationError):
        DepositSettingsService.upsert(db, -1.0)

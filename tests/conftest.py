from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db, get_session_factory
from app.main import app
from app.models import (
    User, UserRole, Seller, ApprovalStatus, Product, DeliveryPerson, DeliveryAddress
)
from app.utils.security import create_access_token


@pytest.fixture()
def session_factory() -> Generator[sessionmaker, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory) -> Generator[TestClient, None, None]:
    def _get_db_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db_override
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def no_maps_key(monkeypatch):
    """Tests never reach Google; geocoding returns None unless a test patches it"""
    monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", "")


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers() -> Callable[[User], Dict[str, str]]:
    return auth_headers


@pytest.fixture()
def make_user(db) -> Callable[..., User]:
    counter = {"n": 0}

    def _make_user(role: UserRole = UserRole.CUSTOMER, first_name: str = "Test") -> User:
        counter["n"] += 1
        user = User(
            first_name=first_name,
            last_name="User",
            email=f"{role.value}{counter['n']}@example.com",
            phone=f"98765{counter['n']:05d}",
            password_hash="not-a-real-hash",
            role=role.value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def customer(make_user) -> User:
    return make_user(UserRole.CUSTOMER, first_name="Asha")


@pytest.fixture()
def other_customer(make_user) -> User:
    return make_user(UserRole.CUSTOMER, first_name="Ravi")


@pytest.fixture()
def admin(make_user) -> User:
    return make_user(UserRole.ADMIN, first_name="Admin")


@pytest.fixture()
def make_seller(db, make_user) -> Callable[..., Seller]:
    def _make_seller(name: str = "Fresh Mart", approved: bool = True) -> Seller:
        user = make_user(UserRole.SELLER if approved else UserRole.CUSTOMER, first_name=name)
        seller = Seller(
            user_id=user.id,
            business_name=name,
            business_address="12 Market Road",
            city="Hyderabad",
            pincode="500001",
            approval_status=(ApprovalStatus.APPROVED if approved else ApprovalStatus.PENDING).value,
            approved_at=datetime.utcnow() if approved else None,
        )
        db.add(seller)
        db.commit()
        db.refresh(seller)
        return seller

    return _make_seller


@pytest.fixture()
def seller(make_seller) -> Seller:
    return make_seller("Fresh Mart")


@pytest.fixture()
def make_product(db) -> Callable[..., Product]:
    def _make_product(seller: Seller, name: str = "Tomatoes", price: str = "40.00", stock: int = 50, **extra) -> Product:
        product = Product(
            seller_id=seller.id,
            name=name,
            price=Decimal(price),
            unit="kg",
            stock=stock,
            approval_status=extra.pop("approval_status", ApprovalStatus.APPROVED.value),
            **extra,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make_product


@pytest.fixture()
def make_address(db) -> Callable[..., DeliveryAddress]:
    def _make_address(user: User, is_default: bool = False, created_at: datetime = None, **fields) -> DeliveryAddress:
        values = {
            "full_name": "Asha Rao",
            "address_line1": "221 Lake View Road",
            "city": "Hyderabad",
            "state": "Telangana",
            "postal_code": "500001",
            "latitude": 17.385,
            "longitude": 78.4867,
        }
        values.update(fields)
        address = DeliveryAddress(user_id=user.id, is_default=is_default, **values)
        if created_at is not None:
            address.created_at = created_at
            address.updated_at = created_at
        db.add(address)
        db.commit()
        db.refresh(address)
        return address

    return _make_address


@pytest.fixture()
def delivery_person(db, make_user) -> DeliveryPerson:
    user = make_user(UserRole.DELIVERY_BOY, first_name="Kiran")
    person = DeliveryPerson(
        user_id=user.id,
        name="Kiran",
        phone="9000000001",
        vehicle_type="bike",
        approval_status=ApprovalStatus.APPROVED.value,
        is_available=True,
    )
    db.add(person)
    db.commit()
    db.refresh(person)
    return person

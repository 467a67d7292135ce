from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from app import create_app
from models import db, Property, Room, Tenant, Lease, Payment, MaintenanceRequest


@pytest.fixture
def app(tmp_path):
    app = create_app('config.TestingConfig')
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def agent(client):
    """A test client with a registered, logged-in agent."""
    response = client.post('/register', data={
        'email': 'agent@example.com',
        'password': 'secret',
        'first_name': 'Ann',
        'last_name': 'Agent',
    })
    assert response.status_code == 302
    return client


@pytest.fixture
def central_park(app):
    """
    Central Park Residences with rooms 101A (occupied), 102B (vacant) and
    103C (maintenance). John Doe holds a current lease on 101A with one paid
    payment dated today and one pending payment.
    """
    today = date.today()
    with app.app_context():
        prop = Property(name='Central Park Residences', address='123 Main St',
                        city='New York', state='NY', zip_code='10001')
        db.session.add(prop)
        db.session.flush()

        rooms = {
            '101A': Room(property_id=prop.id, room_number='101A', status='occupied', rent_amount=1500.0),
            '102B': Room(property_id=prop.id, room_number='102B', status='vacant', rent_amount=1200.0),
            '103C': Room(property_id=prop.id, room_number='103C', status='maintenance', rent_amount=1800.0),
        }
        db.session.add_all(rooms.values())

        tenant = Tenant(first_name='John', last_name='Doe', email='john.doe@example.com',
                        phone='555-123-4567')
        db.session.add(tenant)
        db.session.flush()

        lease = Lease(tenant_id=tenant.id, room_id=rooms['101A'].id,
                      start_date=today - timedelta(days=30), end_date=today + timedelta(days=335),
                      rent_amount=1500.0, deposit_paid=1500.0)
        db.session.add(lease)
        db.session.flush()

        paid = Payment(lease_id=lease.id, amount=1500.0, payment_date=today,
                       payment_for_month=today.replace(day=1), status='paid')
        pending = Payment(lease_id=lease.id, amount=250.0, payment_date=today,
                          payment_for_month=today.replace(day=1), status='pending',
                          note='Utilities, water and power')
        db.session.add_all([paid, pending])

        request_obj = MaintenanceRequest(tenant_id=tenant.id, property_id=prop.id,
                                         title='Leaky Faucet in Kitchen', priority='medium')
        db.session.add(request_obj)
        db.session.commit()

        return SimpleNamespace(
            property_id=prop.id,
            room_ids={number: room.id for number, room in rooms.items()},
            tenant_id=tenant.id,
            lease_id=lease.id,
            paid_payment_id=paid.id,
            pending_payment_id=pending.id,
            maintenance_id=request_obj.id,
        )

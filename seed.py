from datetime import date
from flask import current_app
from werkzeug.security import generate_password_hash
from models import db, User, Property, Room, Tenant, Lease, Payment, MaintenanceRequest

DEMO_PROPERTY = 'Central Park Residences'
DEMO_TENANT_EMAIL = 'john.doe@example.com'


def seed_demo_data(today=None):
    """Demo dataset: one building with three rooms, one tenant on a lease, one paid payment."""
    today = today or date.today()

    email = current_app.config['DEFAULT_ADMIN_EMAIL']
    if not User.query.filter_by(email=email).first():
        db.session.add(User(
            email=email,
            password_hash=generate_password_hash(current_app.config['DEFAULT_ADMIN_PASSWORD']),
            first_name='Admin',
            last_name='User'
        ))

    existing = Property.query.filter_by(name=DEMO_PROPERTY).first()
    if existing or Tenant.query.filter_by(email=DEMO_TENANT_EMAIL).first():
        db.session.commit()
        current_app.logger.info("Demo data already present, nothing seeded")
        return existing

    property = Property(
        name=DEMO_PROPERTY,
        address='123 Main St',
        city='New York',
        state='NY',
        zip_code='10001',
        description='A modern apartment building in the heart of the city.'
    )
    db.session.add(property)
    db.session.flush()

    rooms = [
        Room(property_id=property.id, room_number='101A', status='occupied', rent_amount=1500.00),
        Room(property_id=property.id, room_number='102B', status='vacant', rent_amount=1200.00),
        Room(property_id=property.id, room_number='103C', status='maintenance', rent_amount=1800.00),
    ]
    db.session.add_all(rooms)

    tenant = Tenant(
        first_name='John',
        last_name='Doe',
        email=DEMO_TENANT_EMAIL,
        phone='555-123-4567',
        dob=date(1990, 5, 15)
    )
    db.session.add(tenant)
    db.session.flush()

    lease = Lease(
        tenant_id=tenant.id,
        room_id=rooms[0].id,
        start_date=date(2024, 1, 1),
        end_date=date(2025, 1, 1),
        rent_amount=1500.00,
        deposit_paid=1500.00
    )
    db.session.add(lease)
    db.session.flush()

    db.session.add(Payment(
        lease_id=lease.id,
        amount=1500.00,
        payment_date=today,
        payment_for_month=today.replace(day=1),
        status='paid'
    ))

    db.session.add(MaintenanceRequest(
        tenant_id=tenant.id,
        property_id=property.id,
        title='Leaky Faucet in Kitchen',
        description='The kitchen faucet has been dripping non-stop for the past three days.',
        priority='medium',
        status='open'
    ))

    db.session.commit()
    current_app.logger.info("Seeded demo property %s with %d rooms", property.id, len(rooms))
    return property

from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from datetime import datetime, date

db = SQLAlchemy()

ROOM_STATUSES = ('vacant', 'occupied', 'maintenance')
PAYMENT_STATUSES = ('paid', 'pending', 'overdue')
MAINTENANCE_PRIORITIES = ('low', 'medium', 'high')
MAINTENANCE_STATUSES = ('open', 'in_progress', 'completed')
CONTACT_STATUSES = ('unread', 'read', 'responded')


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))


class Property(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    address = db.Column(db.String(200))
    city = db.Column(db.String(100))
    state = db.Column(db.String(50))
    zip_code = db.Column(db.String(20))
    description = db.Column(db.Text)

    rooms = db.relationship('Room', backref='property', lazy=True,
                            cascade="all, delete-orphan", order_by='Room.room_number')
    maintenance_requests = db.relationship('MaintenanceRequest', backref='property', lazy=True,
                                           cascade="all, delete-orphan")


class Room(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    property_id = db.Column(db.Integer, db.ForeignKey('property.id'), nullable=False)
    room_number = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='vacant') # vacant, occupied, maintenance
    rent_amount = db.Column(db.Float, nullable=False, default=0.0)

    leases = db.relationship('Lease', backref='room', lazy=True)

    @property
    def active_lease(self):
        today = date.today()
        for lease in self.leases:
            if lease.start_date <= today <= lease.end_date:
                return lease
        return None


class Tenant(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    phone = db.Column(db.String(30))
    dob = db.Column(db.Date)

    leases = db.relationship('Lease', backref='tenant', lazy=True, order_by='Lease.start_date')
    maintenance_requests = db.relationship('MaintenanceRequest', backref='tenant', lazy=True,
                                           cascade="all, delete-orphan")

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"


class Lease(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenant.id'), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    rent_amount = db.Column(db.Float, nullable=False)
    deposit_paid = db.Column(db.Float, default=0.0)

    payments = db.relationship('Payment', backref='lease', lazy=True,
                               cascade="all, delete-orphan", order_by='Payment.payment_date')
    documents = db.relationship('LeaseDocument', backref='lease', lazy=True,
                                cascade="all, delete-orphan", order_by='LeaseDocument.uploaded_at')

    def is_active(self, on=None):
        on = on or date.today()
        return self.start_date <= on <= self.end_date

    @property
    def days_to_expiry(self):
        delta = self.end_date - date.today()
        return delta.days


class Payment(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    lease_id = db.Column(db.Integer, db.ForeignKey('lease.id'), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    payment_date = db.Column(db.Date, nullable=False)
    payment_for_month = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending') # paid, pending, overdue
    note = db.Column(db.Text)


class LeaseDocument(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    lease_id = db.Column(db.Integer, db.ForeignKey('lease.id'), nullable=False)
    document_type = db.Column(db.String(50))
    file_name = db.Column(db.String(255), nullable=False) # Original name, for display
    file_path = db.Column(db.String(255), nullable=False) # Relative to UPLOAD_FOLDER
    description = db.Column(db.String(255))
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)


class MaintenanceRequest(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenant.id'), nullable=False)
    property_id = db.Column(db.Integer, db.ForeignKey('property.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    priority = db.Column(db.String(20), nullable=False, default='medium') # low, medium, high
    status = db.Column(db.String(20), nullable=False, default='open') # open, in_progress, completed
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class ContactMessage(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(30))
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='unread') # unread, read, responded
    notes = db.Column(db.Text)
    read_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

from flask import Blueprint, render_template, jsonify, current_app
from models import db, Property, Tenant, Room, Payment, MaintenanceRequest
from sqlalchemy import func
from services.reporting import payments_by_date

dashboard_bp = Blueprint('dashboard', __name__)


def get_dashboard_metrics():
    """Helper to calculate all dashboard metrics"""
    total_properties = Property.query.count()
    total_tenants = Tenant.query.count()
    occupied_rooms = Room.query.filter_by(status='occupied').count()
    vacant_rooms = Room.query.filter_by(status='vacant').count()
    total_rent = db.session.query(func.sum(Payment.amount)).scalar() or 0
    overdue_payments = Payment.query.filter_by(status='overdue').count()

    # Chart data
    monthly_payments = payments_by_date(Payment.query.order_by(Payment.payment_date).all())

    maintenance_rows = db.session.query(
        MaintenanceRequest.status,
        func.count(MaintenanceRequest.id)
    ).group_by(MaintenanceRequest.status).all()
    maintenance_by_status = {status: count for status, count in maintenance_rows}

    return {
        'metrics': {
            'total_properties': total_properties,
            'total_tenants': total_tenants,
            'occupied_rooms': occupied_rooms,
            'vacant_rooms': vacant_rooms,
            'total_rent': float(total_rent),
            'overdue_payments': overdue_payments,
        },
        'monthly_payments': monthly_payments,
        'maintenance_by_status': maintenance_by_status,
    }


@dashboard_bp.route('/metrics')
def metrics():
    """JSON Endpoint for dashboard charts"""
    try:
        return jsonify(get_dashboard_metrics())
    except Exception:
        current_app.logger.exception("Error fetching dashboard data")
        return 'Error fetching dashboard data.', 500


@dashboard_bp.route('/')
def index():
    try:
        data = get_dashboard_metrics()
    except Exception:
        current_app.logger.exception("Error fetching dashboard data")
        return 'Error fetching dashboard data.', 500
    return render_template('dashboard/index.html', **data)

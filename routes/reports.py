from datetime import date
from flask import Blueprint, render_template, request, make_response, current_app, abort
from models import (db, Payment, Property, Room, Tenant, Lease, MaintenanceRequest,
                    PAYMENT_STATUSES, MAINTENANCE_STATUSES, MAINTENANCE_PRIORITIES)
from sqlalchemy import func
from utils import parse_date
from services import reporting, exports

reports_bp = Blueprint('reports', __name__)

EXPORTS = {
    'revenue': ('Revenue', exports.REVENUE_HEADER),
    'payments': ('Payments', exports.PAYMENTS_HEADER),
    'tenants': ('Tenants', exports.TENANTS_HEADER),
}


def revenue_between(start, end=None):
    """SUM of paid payment amounts with payment_date in [start, end]."""
    query = db.session.query(func.sum(Payment.amount))\
        .filter(Payment.status == 'paid', Payment.payment_date >= start)
    if end is not None:
        query = query.filter(Payment.payment_date <= end)
    return float(query.scalar() or 0)


def monthly_revenue_trend(today=None, months=None):
    """One bounded aggregate per trailing month, oldest first; empty months are 0."""
    today = today or date.today()
    months = months or current_app.config['REPORT_TREND_MONTHS']
    return [
        {'month': label, 'amount': revenue_between(start, end)}
        for label, start, end in reporting.month_windows(today, months)
    ]


def _date_range_args():
    start = parse_date(request.args.get('start_date'), 'Start date', required=False)
    end = parse_date(request.args.get('end_date'), 'End date', required=False)
    return start, end


def _paid_payments(start, end):
    return Payment.query.filter(
        Payment.status == 'paid',
        Payment.payment_date >= start,
        Payment.payment_date <= end
    ).order_by(Payment.payment_date.desc()).all()


def _failed(what):
    current_app.logger.exception("Error generating %s", what)
    return f'Error generating {what}.', 500


@reports_bp.route('/')
def dashboard():
    today = date.today()
    try:
        summary = reporting.summary_counts(
            Property.query.all(),
            Room.query.all(),
            Tenant.query.all(),
            Lease.query.all(),
            MaintenanceRequest.query.all(),
            today,
            current_app.config['LEASE_EXPIRY_DAYS']
        )
        summary['monthly_revenue'] = revenue_between(today.replace(day=1))
        summary['yearly_revenue'] = revenue_between(date(today.year, 1, 1))
        summary['outstanding_amount'] = float(
            db.session.query(func.sum(Payment.amount)).filter(Payment.status == 'pending').scalar() or 0
        )

        monthly_revenue = monthly_revenue_trend(today)
        property_occupancy = reporting.property_occupancy(Property.query.order_by(Property.name).all())
    except Exception:
        return _failed('dashboard')

    return render_template('reports/dashboard.html', summary=summary,
                           monthly_revenue=monthly_revenue, property_occupancy=property_occupancy)


@reports_bp.route('/revenue')
def revenue_report():
    start, end = reporting.default_report_range(*_date_range_args())
    try:
        payments = _paid_payments(start, end)
        total_revenue = reporting.sum_amounts(payments)
        revenue_by_property = reporting.revenue_by_property(payments)
    except Exception:
        return _failed('revenue report')

    return render_template('reports/revenue.html', payments=payments, total_revenue=total_revenue,
                           revenue_by_property=revenue_by_property,
                           start_date=start.isoformat(), end_date=end.isoformat())


@reports_bp.route('/payments')
def payments_report():
    status = request.args.get('status')
    start, end = _date_range_args()
    try:
        query = Payment.query
        if status in PAYMENT_STATUSES:
            query = query.filter(Payment.status == status)
        if start and end:
            query = query.filter(Payment.payment_date >= start, Payment.payment_date <= end)
        payments = query.order_by(Payment.payment_date.desc()).all()
        summary = reporting.payment_summary(payments)
    except Exception:
        return _failed('payments report')

    return render_template('reports/payments.html', payments=payments, summary=summary,
                           filters=request.args, statuses=PAYMENT_STATUSES)


@reports_bp.route('/outstanding')
def outstanding_report():
    try:
        payments = Payment.query.filter(Payment.status == 'pending')\
            .order_by(Payment.payment_date.asc()).all()
        total_outstanding = reporting.sum_amounts(payments)
        by_tenant = reporting.outstanding_by_tenant(payments)
    except Exception:
        return _failed('outstanding report')

    return render_template('reports/outstanding.html', outstanding_payments=payments,
                           total_outstanding=total_outstanding, outstanding_by_tenant=by_tenant)


@reports_bp.route('/occupancy')
def occupancy_report():
    try:
        rows = reporting.property_occupancy(Property.query.order_by(Property.name).all())
        overall = reporting.overall_occupancy(rows)
    except Exception:
        return _failed('occupancy report')

    return render_template('reports/occupancy.html', occupancy_data=rows, overall_stats=overall)


@reports_bp.route('/vacancy')
def vacancy_report():
    try:
        vacant_rooms = Room.query.filter_by(status='vacant').order_by(Room.room_number).all()
        by_property = reporting.vacancy_by_property(vacant_rooms)
    except Exception:
        return _failed('vacancy report')

    return render_template('reports/vacancy.html', vacant_rooms=vacant_rooms, vacancy_by_property=by_property)


@reports_bp.route('/tenants')
def tenants_report():
    try:
        rows = reporting.tenant_report(Tenant.query.order_by(Tenant.last_name).all(), date.today())
    except Exception:
        return _failed('tenants report')

    return render_template('reports/tenants.html', tenant_data=rows)


@reports_bp.route('/lease-expiry')
def lease_expiry_report():
    days = request.args.get('days', current_app.config['LEASE_EXPIRY_DAYS'], type=int)
    if days < 0:
        abort(400, description='Days must be zero or more.')
    try:
        today = date.today()
        candidates = Lease.query.filter(Lease.end_date >= today).all()
        expiring = reporting.expiring_leases(candidates, today, days)
    except Exception:
        return _failed('lease expiry report')

    return render_template('reports/lease_expiry.html', expiring_leases=expiring, days_ahead=days)


@reports_bp.route('/properties')
def properties_report():
    try:
        rows = reporting.properties_report(Property.query.order_by(Property.name).all(), date.today())
    except Exception:
        return _failed('properties report')

    return render_template('reports/properties.html', property_data=rows)


@reports_bp.route('/maintenance')
def maintenance_report():
    status = request.args.get('status')
    priority = request.args.get('priority')
    try:
        query = MaintenanceRequest.query
        if status in MAINTENANCE_STATUSES:
            query = query.filter(MaintenanceRequest.status == status)
        if priority in MAINTENANCE_PRIORITIES:
            query = query.filter(MaintenanceRequest.priority == priority)
        requests = query.order_by(MaintenanceRequest.created_at.desc()).all()
        summary = reporting.maintenance_summary(requests)
    except Exception:
        return _failed('maintenance report')

    return render_template('reports/maintenance.html', maintenance_requests=requests, summary=summary,
                           filters=request.args, statuses=MAINTENANCE_STATUSES,
                           priorities=MAINTENANCE_PRIORITIES)


# Exports

def _export_rows(kind, start, end):
    if kind == 'revenue':
        start, end = reporting.default_report_range(start, end)
        return exports.revenue_rows(_paid_payments(start, end))
    if kind == 'payments':
        return exports.payment_rows(Payment.query.order_by(Payment.payment_date.desc()).all())
    tenants = Tenant.query.order_by(Tenant.last_name).all()
    return exports.tenant_rows(reporting.tenant_report(tenants, date.today()))


@reports_bp.route('/export/<kind>')
def export_csv(kind):
    if kind not in EXPORTS:
        abort(404, description='Unknown export.')
    _, header = EXPORTS[kind]
    start, end = _date_range_args()
    try:
        body = exports.to_csv(header, _export_rows(kind, start, end))
    except Exception:
        current_app.logger.exception("Error exporting %s report", kind)
        return f'Error exporting {kind} report.', 500

    response = make_response(body)
    response.headers['Content-Type'] = 'text/csv'
    response.headers['Content-Disposition'] = f'attachment; filename={kind}-report.csv'
    return response


@reports_bp.route('/export/<kind>/xlsx')
def export_xlsx(kind):
    if kind not in EXPORTS:
        abort(404, description='Unknown export.')
    title, header = EXPORTS[kind]
    start, end = _date_range_args()
    try:
        body = exports.to_workbook(title, header, _export_rows(kind, start, end))
    except Exception:
        current_app.logger.exception("Error exporting %s workbook", kind)
        return f'Error exporting {kind} report.', 500

    response = make_response(body)
    response.headers['Content-Type'] = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    response.headers['Content-Disposition'] = f'attachment; filename={kind}-report.xlsx'
    return response

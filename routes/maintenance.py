from flask import Blueprint, render_template, request, redirect, url_for, current_app, abort
from models import (db, MaintenanceRequest, Tenant, Property,
                    MAINTENANCE_PRIORITIES, MAINTENANCE_STATUSES)
from utils import form_text, parse_id, parse_choice

maintenance_bp = Blueprint('maintenance', __name__)


def _request_fields(with_status):
    tenant_id = parse_id(request.form.get('tenant_id'), 'Tenant')
    property_id = parse_id(request.form.get('property_id'), 'Property')
    if db.session.get(Tenant, tenant_id) is None:
        abort(400, description='Unknown tenant.')
    if db.session.get(Property, property_id) is None:
        abort(400, description='Unknown property.')

    fields = dict(
        tenant_id=tenant_id,
        property_id=property_id,
        title=form_text('title', required=True, label='Title'),
        description=form_text('description'),
        priority=parse_choice(request.form.get('priority'), MAINTENANCE_PRIORITIES, 'Priority', default='medium'),
    )
    if with_status:
        fields['status'] = parse_choice(request.form.get('status'), MAINTENANCE_STATUSES, 'Status')
    return fields


def _form_context(maintenance_request, title):
    return dict(
        request_obj=maintenance_request,
        tenants=Tenant.query.order_by(Tenant.last_name).all(),
        properties=Property.query.order_by(Property.name).all(),
        priorities=MAINTENANCE_PRIORITIES,
        statuses=MAINTENANCE_STATUSES,
        title=title,
    )


@maintenance_bp.route('/')
def list_requests():
    requests = MaintenanceRequest.query.order_by(MaintenanceRequest.created_at.desc()).all()
    return render_template('maintenance/list.html', requests=requests)


@maintenance_bp.route('/new')
def new_request():
    return render_template('maintenance/form.html', **_form_context(None, 'Submit New Request'))


@maintenance_bp.route('/', methods=['POST'])
def create_request():
    fields = _request_fields(with_status=False)
    try:
        db.session.add(MaintenanceRequest(status='open', **fields))
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error submitting maintenance request")
        return 'Error submitting maintenance request.', 500

    return redirect(url_for('maintenance.list_requests'))


@maintenance_bp.route('/<int:id>')
def view_request(id):
    maintenance_request = MaintenanceRequest.query.get_or_404(id, description='Request not found.')
    return render_template('maintenance/view.html', request_obj=maintenance_request)


@maintenance_bp.route('/<int:id>/edit')
def edit_request(id):
    maintenance_request = MaintenanceRequest.query.get_or_404(id, description='Request not found.')
    return render_template('maintenance/form.html',
                           **_form_context(maintenance_request, 'Edit Maintenance Request'))


@maintenance_bp.route('/<int:id>/edit', methods=['POST'])
def update_request(id):
    maintenance_request = MaintenanceRequest.query.get_or_404(id, description='Request not found.')
    fields = _request_fields(with_status=True)
    try:
        for key, value in fields.items():
            setattr(maintenance_request, key, value)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating maintenance request %s", id)
        return 'Error updating maintenance request.', 500

    return redirect(url_for('maintenance.view_request', id=id))


@maintenance_bp.route('/<int:id>/delete', methods=['POST'])
def delete_request(id):
    maintenance_request = MaintenanceRequest.query.get_or_404(id, description='Request not found.')
    try:
        db.session.delete(maintenance_request)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting maintenance request %s", id)
        return 'Error deleting maintenance request.', 500

    return redirect(url_for('maintenance.list_requests'))

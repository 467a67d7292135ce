from flask import Blueprint, render_template, request, flash, redirect, url_for, current_app, abort
from sqlalchemy.exc import IntegrityError
from models import db, Tenant
from utils import form_text, parse_date

tenants_bp = Blueprint('tenants', __name__)

DUPLICATE_EMAIL = 'Error: A tenant with this email already exists.'


def _tenant_fields():
    return dict(
        first_name=form_text('first_name', required=True, label='First name'),
        last_name=form_text('last_name', required=True, label='Last name'),
        email=form_text('email', required=True, label='Email'),
        phone=form_text('phone'),
        dob=parse_date(request.form.get('dob'), 'Date of birth', required=False),
    )


@tenants_bp.route('/')
def list_tenants():
    tenants = Tenant.query.order_by(Tenant.last_name.asc()).all()
    return render_template('tenants/list.html', tenants=tenants)


@tenants_bp.route('/new')
def new_tenant():
    return render_template('tenants/form.html', tenant=None, title='Add New Tenant')


@tenants_bp.route('/', methods=['POST'])
def create_tenant():
    fields = _tenant_fields()
    try:
        new_tenant = Tenant(**fields)
        db.session.add(new_tenant)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return DUPLICATE_EMAIL, 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error creating tenant")
        return 'Error creating tenant.', 500

    flash(f'Tenant {new_tenant.full_name} added successfully!', 'success')
    return redirect(url_for('tenants.list_tenants'))


@tenants_bp.route('/<int:id>')
def view_tenant(id):
    tenant = Tenant.query.get_or_404(id, description='Tenant not found.')
    return render_template('tenants/view.html', tenant=tenant)


@tenants_bp.route('/<int:id>/edit')
def edit_tenant(id):
    tenant = Tenant.query.get_or_404(id, description='Tenant not found.')
    return render_template('tenants/form.html', tenant=tenant, title='Edit Tenant')


@tenants_bp.route('/<int:id>/edit', methods=['POST'])
def update_tenant(id):
    tenant = Tenant.query.get_or_404(id, description='Tenant not found.')
    fields = _tenant_fields()
    try:
        for key, value in fields.items():
            setattr(tenant, key, value)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return DUPLICATE_EMAIL, 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating tenant %s", id)
        return 'Error updating tenant.', 500

    return redirect(url_for('tenants.view_tenant', id=id))


@tenants_bp.route('/<int:id>/delete', methods=['POST'])
def delete_tenant(id):
    tenant = Tenant.query.get_or_404(id, description='Tenant not found.')
    if tenant.leases:
        abort(409, description='Cannot delete a tenant with leases. Delete the leases first.')

    try:
        db.session.delete(tenant)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting tenant %s", id)
        return 'Error deleting tenant.', 500

    return redirect(url_for('tenants.list_tenants'))

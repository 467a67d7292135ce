from flask import Blueprint, render_template, request, flash, redirect, url_for, current_app, abort, send_from_directory
from models import db, Lease, Tenant, Room, LeaseDocument
from utils import parse_date, parse_amount, parse_id
from services.documents import collect_uploads, attach_documents, remove_document_file, upload_root
from services.leasing import assign_lease, move_lease, release_lease, RoomUnavailable

leases_bp = Blueprint('leases', __name__)


def _lease_fields():
    fields = dict(
        tenant_id=parse_id(request.form.get('tenant_id'), 'Tenant'),
        room_id=parse_id(request.form.get('room_id'), 'Room'),
        start_date=parse_date(request.form.get('start_date'), 'Start date'),
        end_date=parse_date(request.form.get('end_date'), 'End date'),
        rent_amount=parse_amount(request.form.get('rent_amount'), 'Rent amount'),
        deposit_paid=parse_amount(request.form.get('deposit_paid'), 'Deposit paid', required=False),
    )
    if fields['end_date'] < fields['start_date']:
        abort(400, description='End date must be on or after the start date.')
    if db.session.get(Tenant, fields['tenant_id']) is None:
        abort(400, description='Unknown tenant.')
    return fields


def _uploads():
    return collect_uploads(
        request.files.getlist('documents'),
        request.form.getlist('document_types'),
        request.form.getlist('document_descriptions'),
    )


def _room_choices(current_room_id=None):
    query = Room.query.filter(Room.status == 'vacant')
    if current_room_id:
        query = Room.query.filter((Room.status == 'vacant') | (Room.id == current_room_id))
    return query.order_by(Room.property_id, Room.room_number).all()


@leases_bp.route('/')
def list_leases():
    leases = Lease.query.order_by(Lease.start_date.desc()).all()
    return render_template('leases/list.html', leases=leases)


@leases_bp.route('/new')
def new_lease():
    tenants = Tenant.query.order_by(Tenant.last_name).all()
    return render_template('leases/form.html', lease=None, tenants=tenants,
                           rooms=_room_choices(), title='Add New Lease')


@leases_bp.route('/', methods=['POST'])
def create_lease():
    fields = _lease_fields()
    uploads = _uploads()
    try:
        lease = assign_lease(Lease(**fields), uploads)
    except RoomUnavailable as e:
        abort(409, description=str(e))
    except LookupError as e:
        abort(400, description=str(e))
    except Exception:
        current_app.logger.exception("Error creating lease")
        return 'Error creating lease.', 500

    flash(f'Lease #{lease.id} created.', 'success')
    return redirect(url_for('leases.list_leases'))


@leases_bp.route('/<int:id>')
def view_lease(id):
    lease = Lease.query.get_or_404(id, description='Lease not found.')
    return render_template('leases/view.html', lease=lease)


@leases_bp.route('/<int:id>/edit')
def edit_lease(id):
    lease = Lease.query.get_or_404(id, description='Lease not found.')
    tenants = Tenant.query.order_by(Tenant.last_name).all()
    return render_template('leases/form.html', lease=lease, tenants=tenants,
                           rooms=_room_choices(lease.room_id), title='Edit Lease')


@leases_bp.route('/<int:id>/edit', methods=['POST'])
def update_lease(id):
    lease = Lease.query.get_or_404(id, description='Lease not found.')
    fields = _lease_fields()
    uploads = _uploads()
    try:
        move_lease(lease, fields.pop('room_id'))
        for key, value in fields.items():
            setattr(lease, key, value)
        attach_documents(lease, uploads)
        db.session.commit()
    except RoomUnavailable as e:
        db.session.rollback()
        abort(409, description=str(e))
    except LookupError as e:
        db.session.rollback()
        abort(400, description=str(e))
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating lease %s", id)
        return 'Error updating lease.', 500

    return redirect(url_for('leases.view_lease', id=id))


@leases_bp.route('/<int:id>/delete', methods=['POST'])
def delete_lease(id):
    lease = Lease.query.get_or_404(id, description='Lease not found.')
    try:
        release_lease(lease)
    except Exception:
        current_app.logger.exception("Error deleting lease %s", id)
        return 'Error deleting lease.', 500

    return redirect(url_for('leases.list_leases'))


def _get_document(id, doc_id):
    document = LeaseDocument.query.get_or_404(doc_id, description='Document not found.')
    if document.lease_id != id:
        abort(404, description='Document not found.')
    return document


@leases_bp.route('/<int:id>/documents/<int:doc_id>')
def download_document(id, doc_id):
    document = _get_document(id, doc_id)
    return send_from_directory(upload_root(), document.file_path,
                               as_attachment=True, download_name=document.file_name)


@leases_bp.route('/<int:id>/documents/<int:doc_id>/delete', methods=['POST'])
def delete_document(id, doc_id):
    document = _get_document(id, doc_id)

    # File first, best effort; the row goes regardless
    remove_document_file(document)
    try:
        db.session.delete(document)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting document %s", doc_id)
        return 'Error deleting document.', 500

    flash('Document deleted.', 'success')
    return redirect(url_for('leases.view_lease', id=id))

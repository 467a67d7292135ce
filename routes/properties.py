from flask import Blueprint, render_template, request, flash, redirect, url_for, make_response, current_app, abort
from models import db, Property, Room, ROOM_STATUSES
from utils import form_text, parse_amount, parse_choice
from services.leasing import reconcile_room_statuses
from services.room_import import read_room_sheet, template_workbook

properties_bp = Blueprint('properties', __name__)


def _property_fields():
    return dict(
        name=form_text('name', required=True, label='Name'),
        address=form_text('address'),
        city=form_text('city'),
        state=form_text('state'),
        zip_code=form_text('zip_code'),
        description=form_text('description'),
    )


@properties_bp.route('/')
def list_properties():
    properties = Property.query.order_by(Property.name).all()
    return render_template('properties/list.html', properties=properties)


@properties_bp.route('/new')
def new_property():
    return render_template('properties/form.html', property=None, title='Add New Property')


@properties_bp.route('/', methods=['POST'])
def create_property():
    fields = _property_fields()
    try:
        new_property = Property(**fields)
        db.session.add(new_property)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error creating property")
        return 'Error creating property.', 500

    flash(f'Property {new_property.name} added successfully!', 'success')
    return redirect(url_for('properties.list_properties'))


@properties_bp.route('/<int:id>')
def view_property(id):
    property = Property.query.get_or_404(id, description='Property not found.')
    return render_template('properties/view.html', property=property)


@properties_bp.route('/<int:id>/edit')
def edit_property(id):
    property = Property.query.get_or_404(id, description='Property not found.')
    return render_template('properties/form.html', property=property, title='Edit Property')


@properties_bp.route('/<int:id>/edit', methods=['POST'])
def update_property(id):
    property = Property.query.get_or_404(id, description='Property not found.')
    fields = _property_fields()
    try:
        for key, value in fields.items():
            setattr(property, key, value)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating property %s", id)
        return 'Error updating property.', 500

    return redirect(url_for('properties.view_property', id=id))


@properties_bp.route('/<int:id>/delete', methods=['POST'])
def delete_property(id):
    property = Property.query.get_or_404(id, description='Property not found.')

    # Rooms and maintenance requests go with the property; leased rooms block it
    if any(room.leases for room in property.rooms):
        abort(409, description='Cannot delete a property with leased rooms. Delete the leases first.')

    try:
        db.session.delete(property)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting property %s", id)
        return 'Error deleting property.', 500

    return redirect(url_for('properties.list_properties'))


@properties_bp.route('/reconcile', methods=['POST'])
def reconcile():
    try:
        changed = reconcile_room_statuses()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error reconciling room statuses")
        return 'Error reconciling room statuses.', 500

    flash(f'Room statuses reconciled ({changed} updated).', 'success')
    return redirect(url_for('properties.list_properties'))


# Rooms Management

@properties_bp.route('/<int:id>/rooms/new')
def new_room(id):
    property = Property.query.get_or_404(id, description='Property not found.')
    return render_template('properties/room_form.html', room=None, property=property,
                           statuses=ROOM_STATUSES, title='Add New Room')


@properties_bp.route('/<int:id>/rooms', methods=['POST'])
def create_room(id):
    property = Property.query.get_or_404(id, description='Property not found.')
    room_number = form_text('room_number', required=True, label='Room number')
    rent_amount = parse_amount(request.form.get('rent_amount'), 'Rent amount')
    try:
        db.session.add(Room(property_id=property.id, room_number=room_number, rent_amount=rent_amount))
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error creating room for property %s", id)
        return 'Error creating room.', 500

    return redirect(url_for('properties.view_property', id=id))


def _get_room(id, room_id):
    room = Room.query.get_or_404(room_id, description='Room not found.')
    if room.property_id != id:
        abort(404, description='Room not found.')
    return room


@properties_bp.route('/<int:id>/rooms/<int:room_id>/edit')
def edit_room(id, room_id):
    room = _get_room(id, room_id)
    return render_template('properties/room_form.html', room=room, property=room.property,
                           statuses=ROOM_STATUSES, title='Edit Room')


@properties_bp.route('/<int:id>/rooms/<int:room_id>/edit', methods=['POST'])
def update_room(id, room_id):
    room = _get_room(id, room_id)
    room_number = form_text('room_number', required=True, label='Room number')
    rent_amount = parse_amount(request.form.get('rent_amount'), 'Rent amount')
    status = parse_choice(request.form.get('status'), ROOM_STATUSES, 'Status', default=room.status)
    try:
        room.room_number = room_number
        room.rent_amount = rent_amount
        room.status = status
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating room %s", room_id)
        return 'Error updating room.', 500

    return redirect(url_for('properties.view_property', id=id))


@properties_bp.route('/<int:id>/rooms/<int:room_id>/delete', methods=['POST'])
def delete_room(id, room_id):
    room = _get_room(id, room_id)
    if room.leases:
        abort(409, description='Cannot delete a room with leases. Delete the leases first.')

    try:
        db.session.delete(room)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting room %s", room_id)
        return 'Error deleting room.', 500

    return redirect(url_for('properties.view_property', id=id))


@properties_bp.route('/rooms/template')
def download_room_template():
    response = make_response(template_workbook())
    response.headers["Content-Disposition"] = "attachment; filename=room_upload_template.xlsx"
    response.headers["Content-Type"] = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    return response


@properties_bp.route('/<int:id>/rooms/import', methods=['GET', 'POST'])
def import_rooms(id):
    property = Property.query.get_or_404(id, description='Property not found.')

    if request.method == 'GET':
        return render_template('properties/room_import.html', property=property)

    file = request.files.get('file')
    if not file or file.filename == '':
        abort(400, description='No file selected.')

    try:
        rows = read_room_sheet(file)
    except Exception:
        current_app.logger.exception("Unreadable room sheet %s", file.filename)
        abort(400, description='Could not read the uploaded sheet.')

    existing = {r.room_number for r in property.rooms}
    added_count = 0
    skipped_count = 0
    try:
        for row in rows:
            if row['room_number'] in existing:
                skipped_count += 1
                continue
            db.session.add(Room(property_id=property.id, **row))
            existing.add(row['room_number'])
            added_count += 1
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error importing rooms for property %s", id)
        return 'Error importing rooms.', 500

    flash(f'Added {added_count} rooms. Skipped {skipped_count} duplicates.', 'success')
    return redirect(url_for('properties.view_property', id=id))

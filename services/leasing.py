"""
Lease <-> Room status bookkeeping.

A room is marked occupied when a lease is assigned to it and vacant when the
lease is released. Both writes go out in one commit.
"""
from datetime import date
from flask import current_app
from models import db, Room, Lease
from services.documents import attach_documents, remove_document_file


class RoomUnavailable(ValueError):
    pass


def assign_lease(lease, uploads=()):
    """Persist a new lease, its documents and the room's occupied status in one commit."""
    room = db.session.get(Room, lease.room_id)
    if room is None:
        raise LookupError("Room not found.")
    if room.status == 'occupied':
        raise RoomUnavailable(f"Room {room.room_number} is already occupied.")

    try:
        db.session.add(lease)
        room.status = 'occupied'
        attach_documents(lease, uploads)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return lease


def move_lease(lease, new_room_id):
    """Point an existing lease at another room, swapping both rooms' statuses (not committed)."""
    if new_room_id == lease.room_id:
        return
    new_room = db.session.get(Room, new_room_id)
    if new_room is None:
        raise LookupError("Room not found.")
    if new_room.status == 'occupied':
        raise RoomUnavailable(f"Room {new_room.room_number} is already occupied.")

    old_room = db.session.get(Room, lease.room_id)
    if old_room is not None:
        old_room.status = 'vacant'
    new_room.status = 'occupied'
    lease.room_id = new_room.id


def release_lease(lease):
    """
    Delete a lease, its payments and documents, and free the room.
    Document files are removed first; failures there are logged only.
    """
    for document in lease.documents:
        remove_document_file(document)

    try:
        room = db.session.get(Room, lease.room_id)
        if room is not None:
            room.status = 'vacant'
        db.session.delete(lease)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def reconcile_room_statuses(today=None):
    """
    Re-derive room status from lease dates. Rooms with an active lease become
    occupied; rooms marked occupied without one become vacant. Rooms under
    maintenance are left alone. Returns the number of rooms changed.
    """
    today = today or date.today()
    changed = 0
    for room in Room.query.all():
        if room.status == 'maintenance':
            continue
        active = Lease.query.filter(
            Lease.room_id == room.id,
            Lease.start_date <= today,
            Lease.end_date >= today
        ).first()

        if active and room.status != 'occupied':
            room.status = 'occupied'
            changed += 1
        elif not active and room.status == 'occupied':
            room.status = 'vacant'
            changed += 1

    db.session.commit()
    current_app.logger.info("Room status reconciliation changed %d room(s)", changed)
    return changed

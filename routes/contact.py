from datetime import datetime
from flask import Blueprint, render_template, request, redirect, url_for, current_app
from models import db, ContactMessage, CONTACT_STATUSES
from utils import form_text

contact_bp = Blueprint('contact', __name__)


def _mark_read(message):
    message.status = 'read'
    message.read_at = datetime.utcnow()


@contact_bp.route('/')
def list_contacts():
    status = request.args.get('status')

    query = ContactMessage.query
    if status in CONTACT_STATUSES:
        query = query.filter_by(status=status)
    messages = query.order_by(ContactMessage.created_at.desc()).all()

    stats = {'total': ContactMessage.query.count()}
    for s in CONTACT_STATUSES:
        stats[s] = ContactMessage.query.filter_by(status=s).count()

    return render_template('contact/index.html', messages=messages, stats=stats,
                           current_filter=status if status in CONTACT_STATUSES else 'all')


@contact_bp.route('/<int:id>')
def view_contact(id):
    message = ContactMessage.query.get_or_404(id, description='Message not found.')

    # Opening an unread message marks it read
    if message.status == 'unread':
        try:
            _mark_read(message)
            db.session.commit()
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Error updating message %s", id)
            return 'Error loading message.', 500

    return render_template('contact/detail.html', message=message)


@contact_bp.route('/<int:id>/mark-read', methods=['POST'])
def mark_read(id):
    message = ContactMessage.query.get_or_404(id, description='Message not found.')
    try:
        _mark_read(message)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating message %s", id)
        return 'Error updating message.', 500

    return redirect(url_for('contact.list_contacts'))


@contact_bp.route('/<int:id>/mark-responded', methods=['POST'])
def mark_responded(id):
    message = ContactMessage.query.get_or_404(id, description='Message not found.')
    notes = form_text('notes')
    try:
        message.status = 'responded'
        message.notes = notes
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating message %s", id)
        return 'Error updating message.', 500

    return redirect(url_for('contact.list_contacts'))


@contact_bp.route('/<int:id>/delete', methods=['POST'])
def delete_contact(id):
    message = ContactMessage.query.get_or_404(id, description='Message not found.')
    try:
        db.session.delete(message)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting message %s", id)
        return 'Error deleting message.', 500

    return redirect(url_for('contact.list_contacts'))

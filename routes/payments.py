from flask import Blueprint, render_template, request, redirect, url_for, current_app, abort
from models import db, Payment, Lease, PAYMENT_STATUSES
from utils import form_text, parse_date, parse_month, parse_amount, parse_id, parse_choice

payments_bp = Blueprint('payments', __name__)


def _payment_fields():
    lease_id = parse_id(request.form.get('lease_id'), 'Lease')
    if db.session.get(Lease, lease_id) is None:
        abort(400, description='Unknown lease.')
    return dict(
        lease_id=lease_id,
        amount=parse_amount(request.form.get('amount'), 'Amount'),
        payment_date=parse_date(request.form.get('payment_date'), 'Payment date'),
        payment_for_month=parse_month(request.form.get('payment_for_month')),
        status=parse_choice(request.form.get('status'), PAYMENT_STATUSES, 'Status', default='pending'),
        note=form_text('note'),
    )


def _lease_choices():
    return Lease.query.order_by(Lease.start_date.desc()).all()


@payments_bp.route('/')
def list_payments():
    payments = Payment.query.order_by(Payment.payment_date.desc()).all()
    return render_template('payments/list.html', payments=payments)


@payments_bp.route('/new')
def new_payment():
    return render_template('payments/form.html', payment=None, leases=_lease_choices(),
                           statuses=PAYMENT_STATUSES, title='Record New Payment')


@payments_bp.route('/', methods=['POST'])
def create_payment():
    fields = _payment_fields()
    try:
        db.session.add(Payment(**fields))
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error recording payment")
        return 'Error recording payment.', 500

    return redirect(url_for('payments.list_payments'))


@payments_bp.route('/<int:id>')
def view_payment(id):
    payment = Payment.query.get_or_404(id, description='Payment not found.')
    return render_template('payments/view.html', payment=payment)


@payments_bp.route('/<int:id>/edit')
def edit_payment(id):
    payment = Payment.query.get_or_404(id, description='Payment not found.')
    return render_template('payments/form.html', payment=payment, leases=_lease_choices(),
                           statuses=PAYMENT_STATUSES, title='Edit Payment Record')


@payments_bp.route('/<int:id>/edit', methods=['POST'])
def update_payment(id):
    payment = Payment.query.get_or_404(id, description='Payment not found.')
    fields = _payment_fields()
    try:
        for key, value in fields.items():
            setattr(payment, key, value)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error updating payment %s", id)
        return 'Error updating payment.', 500

    return redirect(url_for('payments.view_payment', id=id))


@payments_bp.route('/<int:id>/delete', methods=['POST'])
def delete_payment(id):
    payment = Payment.query.get_or_404(id, description='Payment not found.')
    try:
        db.session.delete(payment)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error deleting payment %s", id)
        return 'Error deleting payment.', 500

    return redirect(url_for('payments.list_payments'))

from flask import Blueprint, render_template, redirect, url_for, request, flash, current_app, abort
from flask_login import login_user, logout_user, current_user
from werkzeug.security import check_password_hash, generate_password_hash
from sqlalchemy.exc import IntegrityError
from models import db, User, ContactMessage
from utils import form_text

auth_bp = Blueprint('auth', __name__)


def login_gate():
    """
    Capability check consulted before any view of an agent blueprint is
    dispatched. Register with `bp.before_request(login_gate)`.
    """
    if not current_user.is_authenticated:
        return current_app.login_manager.unauthorized()


@auth_bp.route('/')
def index():
    return redirect(url_for('auth.login'))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'POST':
        email = (request.form.get('email') or '').strip()
        password = request.form.get('password') or ''

        user = User.query.filter_by(email=email).first()

        if user and check_password_hash(user.password_hash, password):
            login_user(user)
            current_app.logger.info("User %s logged in", user.id)
            return redirect(url_for('dashboard.index'))
        return render_template('auth/login.html', error='Invalid email or password')

    return render_template('auth/login.html', error=None)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    if request.method == 'GET':
        return render_template('auth/register.html', error=None)

    email = form_text('email', required=True, label='Email')
    password = request.form.get('password') or ''
    if not password:
        abort(400, description='Password is required.')

    try:
        new_user = User(
            email=email,
            password_hash=generate_password_hash(password),
            first_name=form_text('first_name'),
            last_name=form_text('last_name')
        )
        db.session.add(new_user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return render_template('auth/register.html', error='Email already exists.'), 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error registering user")
        return 'Error registering user.', 500

    login_user(new_user)
    return redirect(url_for('dashboard.index'))


@auth_bp.route('/logout')
def logout():
    logout_user()
    return redirect(url_for('auth.login'))


@auth_bp.route('/contact', methods=['GET', 'POST'])
def contact():
    """Public contact form; messages land in the agents' inbox as unread."""
    if request.method == 'GET':
        return render_template('contact/public_form.html')

    name = form_text('name', required=True, label='Name')
    email = form_text('email', required=True, label='Email')
    message = form_text('message', required=True, label='Message')

    try:
        db.session.add(ContactMessage(
            name=name,
            email=email,
            phone=form_text('phone'),
            message=message,
            status='unread'
        ))
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Error saving contact message")
        return 'Error sending message.', 500

    flash('Thank you, we will be in touch shortly.', 'success')
    return redirect(url_for('auth.contact'))

import os
import logging
import click
from flask import Flask, redirect, url_for
from flask_login import LoginManager
from werkzeug.exceptions import HTTPException
from werkzeug.security import generate_password_hash
from models import db, User
from routes.auth import auth_bp, login_gate
from routes.dashboard import dashboard_bp
from routes.properties import properties_bp
from routes.tenants import tenants_bp
from routes.leases import leases_bp
from routes.payments import payments_bp
from routes.maintenance import maintenance_bp
from routes.contact import contact_bp
from routes.reports import reports_bp

AGENT_BLUEPRINTS = (
    (dashboard_bp, '/agent/dashboard'),
    (properties_bp, '/agent/properties'),
    (tenants_bp, '/agent/tenants'),
    (leases_bp, '/agent/leases'),
    (payments_bp, '/agent/payments'),
    (maintenance_bp, '/agent/maintenance'),
    (contact_bp, '/agent/contacts'),
    (reports_bp, '/agent/reports'),
)

# Every agent view is dispatched only after the session check passes
for _bp, _prefix in AGENT_BLUEPRINTS:
    _bp.before_request(login_gate)


def _configure_logging(app):
    level = app.config.get('LOG_LEVEL', 'INFO')
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s [%(name)s] %(message)s'))
        root.addHandler(handler)


def _register_error_handlers(app):
    @app.errorhandler(400)
    @app.errorhandler(404)
    @app.errorhandler(409)
    def plain_error(e: HTTPException):
        return e.description, e.code, {'Content-Type': 'text/plain; charset=utf-8'}


def ensure_default_admin(app):
    email = app.config['DEFAULT_ADMIN_EMAIL']
    if not User.query.filter_by(email=email).first():
        admin = User(
            email=email,
            password_hash=generate_password_hash(app.config['DEFAULT_ADMIN_PASSWORD']),
            first_name='Admin',
            last_name='User'
        )
        db.session.add(admin)
        db.session.commit()
        app.logger.info("Created default admin user %s", email)


def _register_cli(app):
    @app.cli.command('seed')
    def seed_command():
        """Load the demo property, tenant, lease and payment."""
        from seed import seed_demo_data
        seed_demo_data()
        click.echo('Seeding finished.')

    @app.cli.command('reconcile-rooms')
    def reconcile_rooms_command():
        """Re-derive room status from active lease dates."""
        from services.leasing import reconcile_room_statuses
        changed = reconcile_room_statuses()
        click.echo(f'Updated {changed} room(s).')


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)

    if not app.config.get('UPLOAD_FOLDER'):
        app.config['UPLOAD_FOLDER'] = os.path.join(app.instance_path, 'uploads')

    _configure_logging(app)

    db.init_app(app)

    login_manager = LoginManager()
    login_manager.login_view = 'auth.login'
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Register Blueprints
    app.register_blueprint(auth_bp)
    for bp, prefix in AGENT_BLUEPRINTS:
        app.register_blueprint(bp, url_prefix=prefix)

    @app.route('/dashboard')
    def legacy_dashboard():
        return redirect(url_for('dashboard.index'))

    _register_error_handlers(app)
    _register_cli(app)

    with app.app_context():
        db.create_all()
        if app.config.get('SEED_DEFAULT_ADMIN'):
            ensure_default_admin(app)

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)

"""bjjfed: federation management dashboard."""

from __future__ import annotations

import logging

from flask import Flask, current_app
from flask_login import UserMixin
from flask_talisman import Talisman

from bjjfed.config import Config
from bjjfed.db import init_db, make_db_factory
from bjjfed.extensions import csrf, limiter, login_manager
from bjjfed.models import Account
from bjjfed.repositories import AccountRepository, LocalCacheRepository
from bjjfed.services import (
    AuditService,
    AuthService,
    ClassifierService,
    CloudService,
    FederationStore,
    MemberService,
    NotificationService,
    ScheduleService,
    SyncService,
)

__version__ = '1.2.0'

logger = logging.getLogger(__name__)


class SessionUser(UserMixin):
    """Flask-Login wrapper around a local account."""
    def __init__(self, account: Account):
        self.account = account
        self.id = account.id
        self.username = account.username
        self.role = account.role


@login_manager.user_loader
def load_user(user_id):
    """Load account by ID for Flask-Login"""
    try:
        account = current_app.extensions['bjjfed']['auth_service'].get_account(int(user_id))
        return SessionUser(account) if account else None
    except Exception as e:
        logger.error(f"Error loading user: {e}")
        return None


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__, template_folder='../templates')
    app.config.from_object(config_class)
    configure_logging(app.config['LOG_LEVEL'])

    if not app.config.get('SECRET_KEY'):
        logger.warning("SECRET_KEY not set! Using insecure default. Generate a secure key with: python -c 'import secrets; print(secrets.token_hex(32))'")
        app.config['SECRET_KEY'] = 'dev-secret-key-change-in-production'
    app.config['WTF_CSRF_TIME_LIMIT'] = None

    csrf.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    app.config.setdefault('RATELIMIT_DEFAULT', f"{app.config['RATE_LIMIT_PER_MINUTE']} per minute")
    limiter.init_app(app)
    _configure_security_headers(app)

    database_path = app.config['DATABASE_PATH']
    init_db(database_path)
    db_factory = make_db_factory(database_path)

    account_repo = AccountRepository(db_factory)
    cache_repo = LocalCacheRepository(db_factory)

    store = FederationStore(cache_repo, app.config['DEFAULT_PAY_KEY'])
    store.load()
    timeout = app.config['HTTP_TIMEOUT_SECONDS']
    cloud = CloudService(app.config['SUPABASE_URL'], app.config['SUPABASE_KEY'], timeout=timeout)
    classifier = ClassifierService(
        app.config['GEMINI_API_KEY'],
        app.config['GEMINI_MODEL'],
        app.config['GEMINI_API_URL'],
        timeout=timeout,
    )
    notification_service = NotificationService(app.config['NOTIFICATION_TTL_SECONDS'])
    auth_service = AuthService(account_repo, store)
    member_service = MemberService(store, cloud, notification_service, auth_service)
    sync_service = SyncService(store, cloud)
    audit_service = AuditService(
        store, classifier, cloud, notification_service,
        max_workers=app.config['AUDIT_MAX_WORKERS'],
    )
    schedule_service = ScheduleService(cache_repo, sync_service)

    app.extensions['bjjfed'] = {
        'db_factory': db_factory,
        'store': store,
        'cloud': cloud,
        'auth_service': auth_service,
        'member_service': member_service,
        'notification_service': notification_service,
        'sync_service': sync_service,
        'audit_service': audit_service,
        'schedule_service': schedule_service,
    }

    _register_blueprints(app)

    if app.config['SYNC_ON_STARTUP'] and cloud.enabled:
        sync_service.refresh()
    if app.config['SCHEDULER_ENABLED']:
        schedule_service.start()

    return app


def _configure_security_headers(app: Flask) -> None:
    # Only enforce HTTPS if explicitly enabled (for reverse proxy setups)
    if app.config['FORCE_HTTPS']:
        Talisman(app,
            force_https=True,
            strict_transport_security=True,
            content_security_policy={
                'default-src': "'self'",
                'script-src': ["'self'", "'unsafe-inline'"],
                'style-src': ["'self'", "'unsafe-inline'"],
                'img-src': ["'self'", "data:", "https:"],
            }
        )
        return

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        return response


def _register_blueprints(app: Flask) -> None:
    from bjjfed.routes import (
        create_announcements_blueprint,
        create_audit_blueprint,
        create_auth_blueprint,
        create_health_blueprint,
        create_members_blueprint,
        create_notifications_blueprint,
        create_pages_blueprint,
        create_settings_blueprint,
        create_sync_blueprint,
    )

    services = app.extensions['bjjfed']
    app_logger = logging.getLogger('bjjfed.routes')

    app.register_blueprint(create_auth_blueprint(
        auth_service=services['auth_service'],
        user_class=SessionUser,
        limiter=limiter,
        csrf=csrf,
        version=__version__,
        logger=app_logger,
    ))
    app.register_blueprint(create_pages_blueprint(
        store=services['store'],
        member_service=services['member_service'],
        audit_service=services['audit_service'],
        payment_link=app.config['PAYMENT_LINK'],
        version=__version__,
    ))
    app.register_blueprint(create_members_blueprint(
        member_service=services['member_service'],
        store=services['store'],
        csrf=csrf,
        logger=app_logger,
    ))
    app.register_blueprint(create_announcements_blueprint(
        member_service=services['member_service'],
        store=services['store'],
        csrf=csrf,
        logger=app_logger,
    ))
    app.register_blueprint(create_settings_blueprint(
        member_service=services['member_service'],
        schedule_service=services['schedule_service'],
        store=services['store'],
        cloud=services['cloud'],
        csrf=csrf,
        logger=app_logger,
    ))
    app.register_blueprint(create_audit_blueprint(
        audit_service=services['audit_service'],
        csrf=csrf,
        logger=app_logger,
    ))
    app.register_blueprint(create_sync_blueprint(
        sync_service=services['sync_service'],
        store=services['store'],
        limiter=limiter,
        csrf=csrf,
        webhook_token=app.config['SYNC_WEBHOOK_TOKEN'],
        logger=app_logger,
    ))
    app.register_blueprint(create_notifications_blueprint(
        notification_service=services['notification_service'],
        csrf=csrf,
    ))
    app.register_blueprint(create_health_blueprint(
        store=services['store'],
        scheduler=services['schedule_service'].scheduler,
        db_factory=services['db_factory'],
        version=__version__,
    ))

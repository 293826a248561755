"""Routes package."""
from .announcements import create_announcements_blueprint
from .audit import create_audit_blueprint
from .auth import create_auth_blueprint
from .health import create_health_blueprint
from .members import create_members_blueprint
from .notifications import create_notifications_blueprint
from .pages import create_pages_blueprint
from .settings import create_settings_blueprint
from .sync import create_sync_blueprint

__all__ = [
    'create_announcements_blueprint',
    'create_audit_blueprint',
    'create_auth_blueprint',
    'create_health_blueprint',
    'create_members_blueprint',
    'create_notifications_blueprint',
    'create_pages_blueprint',
    'create_settings_blueprint',
    'create_sync_blueprint',
]

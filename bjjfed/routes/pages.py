from __future__ import annotations

from flask import Blueprint, jsonify, redirect, render_template, url_for
from flask_login import current_user, login_required

from bjjfed.models import ROLE_ADMIN, ROLE_TEACHER, is_blocked
from bjjfed.utils.access import session_member

DEFAULT_BLOCK_MESSAGE = 'Pending payment detected in the system.'

VIEWS = {
    ROLE_ADMIN: 'admin',
    ROLE_TEACHER: 'teacher',
}


def view_for(member) -> str:
    """Dashboard view name for a member's role."""
    return VIEWS.get(member.role, 'student')


def create_pages_blueprint(*, store, member_service, audit_service, payment_link: str, version: str):
    """Create dashboard page routes with injected dependencies."""
    blueprint = Blueprint('pages', __name__)

    @blueprint.route('/')
    def index():
        """Route the signed-in user to their dashboard or the blocking screen."""
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login'))

        member = session_member()
        if is_blocked(member):
            return render_template(
                'blocked.html',
                member=member,
                message=member.last_ai_audit or DEFAULT_BLOCK_MESSAGE,
                payment_link=payment_link,
                version=version,
            )

        view = view_for(member)
        context = {
            'member': member,
            'cloud_status': store.cloud_status,
            'audit_running': audit_service.running,
            'announcements': store.announcements(),
            'students': member_service.visible_students(member),
            'version': version,
        }
        if view == 'admin':
            context['teachers'] = store.teachers()
            context['pay_key'] = store.pay_key()
        elif view == 'teacher':
            context['pay_key'] = store.pay_key()
        return render_template(f'{view}.html', **context)

    @blueprint.route('/api/session')
    @login_required
    def api_session():
        """Current session: resolved member, view and gate state."""
        member = session_member()
        return jsonify({
            'user': member.to_dict(),
            'role': member.role,
            'view': view_for(member),
            'blocked': is_blocked(member),
            'cloud_status': store.cloud_status,
            'payment_link': payment_link,
        })

    return blueprint

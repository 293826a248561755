from __future__ import annotations

from flask import Blueprint, jsonify, request

from bjjfed.models import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER
from bjjfed.routes.errors import error_response
from bjjfed.services.base import ServiceError
from bjjfed.utils.access import role_required, session_member
from bjjfed.utils.validators import sanitize_string

MAX_ANNOUNCEMENT_LENGTH = 2000


def create_announcements_blueprint(*, member_service, store, csrf, logger):
    """Create announcement routes with injected dependencies."""
    blueprint = Blueprint('announcements', __name__)
    csrf.exempt(blueprint)

    @blueprint.route('/api/announcements', methods=['GET'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT)
    def list_announcements():
        """Announcements, newest first."""
        return jsonify([a.to_dict() for a in store.announcements()])

    @blueprint.route('/api/announcements', methods=['POST'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER)
    def create_announcement():
        """Publish an announcement."""
        data = request.get_json(silent=True) or {}
        content = sanitize_string(data.get('content', ''), max_length=MAX_ANNOUNCEMENT_LENGTH)
        if not content:
            return jsonify({'error': 'Announcement content is required'}), 400
        try:
            announcement = member_service.post_announcement(session_member(), content)
            return jsonify({
                'success': True,
                'announcement': announcement.to_dict(),
                'cloud_status': store.cloud_status,
            }), 201
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to post announcement: {e}")
            return jsonify({'error': 'Failed to post announcement'}), 500

    return blueprint

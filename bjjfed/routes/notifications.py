from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import login_required


def create_notifications_blueprint(*, notification_service, csrf):
    """Create in-app notification routes."""
    blueprint = Blueprint('notifications', __name__)
    csrf.exempt(blueprint)

    @blueprint.route('/api/notifications', methods=['GET'])
    @login_required
    def list_notifications():
        """Live notifications; expired ones are dropped."""
        return jsonify([n.to_dict() for n in notification_service.active()])

    @blueprint.route('/api/notifications/<notification_id>', methods=['DELETE'])
    @login_required
    def dismiss_notification(notification_id):
        if not notification_service.dismiss(notification_id):
            return jsonify({'error': 'Notification not found'}), 404
        return jsonify({'success': True})

    return blueprint

from __future__ import annotations

from flask import Blueprint, jsonify, request

from bjjfed.models import ROLE_ADMIN, ROLE_TEACHER
from bjjfed.routes.errors import error_response
from bjjfed.services.base import ServiceError
from bjjfed.services.schedule_service import SYNC_CRON_DEFAULT
from bjjfed.utils.access import role_required
from bjjfed.utils.validators import sanitize_string, validate_cron_expression


def create_settings_blueprint(*, member_service, schedule_service, store, cloud, csrf, logger):
    """Create settings routes with injected dependencies."""
    blueprint = Blueprint('settings', __name__)
    csrf.exempt(blueprint)

    @blueprint.route('/api/settings', methods=['GET'])
    @role_required(ROLE_ADMIN)
    def get_settings():
        """Get all settings."""
        try:
            return jsonify({
                'pay_key': store.pay_key(),
                'cloud_enabled': cloud.enabled,
                'cloud_status': store.cloud_status,
                **schedule_service.sync_settings(),
            })
        except Exception as e:
            logger.error(f"Failed to get settings: {e}")
            return jsonify({'error': 'Failed to load settings. Please check the database connection.'}), 500

    @blueprint.route('/api/settings/pay-key', methods=['GET'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER)
    def get_pay_key():
        """Federation pay key."""
        return jsonify({'pay_key': store.pay_key()})

    @blueprint.route('/api/settings/pay-key', methods=['PUT'])
    @role_required(ROLE_ADMIN)
    def update_pay_key():
        """Update the federation pay key."""
        data = request.get_json(silent=True) or {}
        pay_key = sanitize_string(data.get('pay_key', ''), max_length=140)
        try:
            member_service.set_pay_key(pay_key)
            return jsonify({'success': True, 'pay_key': store.pay_key()})
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to update pay key: {e}")
            return jsonify({'error': 'Failed to save pay key'}), 500

    @blueprint.route('/api/settings/sync', methods=['POST'])
    @role_required(ROLE_ADMIN)
    def update_sync_settings():
        """Update the periodic cloud resync schedule."""
        try:
            data = request.get_json(silent=True) or {}
            enabled = bool(data.get('enabled', False))
            cron_expression = sanitize_string(data.get('cron', SYNC_CRON_DEFAULT), max_length=50).strip()

            if enabled:
                valid, error = validate_cron_expression(cron_expression)
                if not valid:
                    return jsonify({'error': error}), 400

            schedule_service.save_sync_settings(enabled, cron_expression)
            logger.info("Cloud resync settings updated")
            return jsonify({'success': True, **schedule_service.sync_settings()})
        except Exception as e:
            logger.error(f"Failed to update sync settings: {e}")
            return jsonify({'error': 'Failed to save sync settings'}), 500

    return blueprint

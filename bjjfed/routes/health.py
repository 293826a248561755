from __future__ import annotations

from typing import Callable

from flask import Blueprint, jsonify


def create_health_blueprint(store, scheduler, db_factory: Callable[[], object], version: str):
    """Create health and version routes with injected dependencies."""
    blueprint = Blueprint('health', __name__)

    @blueprint.route('/health')
    def health_check():
        """Health check endpoint for container orchestration and monitoring."""
        health = {
            'status': 'healthy',
            'version': version,
            'checks': {},
        }

        # Check database connectivity
        try:
            conn = db_factory()
            cursor = conn.cursor()
            cursor.execute('SELECT 1')
            conn.close()
            health['checks']['database'] = {'status': 'ok'}
        except Exception as e:
            health['status'] = 'unhealthy'
            health['checks']['database'] = {'status': 'error', 'message': str(e)}

        # Scheduler only runs when enabled; a stopped scheduler is reported, not fatal
        try:
            if scheduler.running:
                health['checks']['scheduler'] = {'status': 'ok', 'jobs': len(scheduler.get_jobs())}
            else:
                health['checks']['scheduler'] = {'status': 'stopped'}
        except Exception as e:
            health['status'] = 'degraded'
            health['checks']['scheduler'] = {'status': 'error', 'message': str(e)}

        health['checks']['cloud'] = {'status': store.cloud_status}

        status_code = 503 if health['status'] == 'unhealthy' else 200
        return jsonify(health), status_code

    @blueprint.route('/api/version')
    def get_version():
        """Get application version and member counts."""
        import sys

        return jsonify({
            'version': version,
            'python_version': sys.version.split()[0],
            'api_version': 'v1',
            'teachers': len(store.teachers()),
            'students': len(store.students()),
            'announcements': len(store.announcements()),
        })

    return blueprint

from __future__ import annotations

from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from bjjfed.routes.errors import error_response
from bjjfed.services.base import ServiceError
from bjjfed.utils.validators import sanitize_string


def create_auth_blueprint(*, auth_service, user_class, limiter, csrf, version: str, logger):
    """Create authentication routes with injected dependencies."""
    blueprint = Blueprint('auth', __name__)

    @blueprint.route('/login', methods=['GET', 'POST'])
    @limiter.limit('10 per minute')
    def login():
        """Login page."""
        if current_user.is_authenticated:
            return redirect(url_for('pages.index'))

        if request.method == 'POST':
            username = sanitize_string(request.form.get('username', ''), max_length=50).strip()
            password = request.form.get('password', '')

            if not username or not password:
                flash('Please enter both username and password', 'error')
                return render_template('login.html', version=version)

            try:
                account = auth_service.authenticate(username, password)
                if account:
                    login_user(user_class(account))
                    logger.info(f"User {username} logged in")
                    return redirect(url_for('pages.index'))

                flash('Invalid username or password', 'error')
                return render_template('login.html', version=version)

            except Exception as e:
                logger.error(f"Login error: {e}")
                flash('An error occurred during login', 'error')
                return render_template('login.html', version=version)

        return render_template('login.html', version=version)

    @blueprint.route('/api/login', methods=['POST'])
    @limiter.limit('10 per minute')
    def api_login():
        """API login for dashboard clients."""
        if current_user.is_authenticated:
            return jsonify({'success': True, 'username': current_user.username})

        data = request.get_json(silent=True) or request.form
        username = sanitize_string(data.get('username', ''), max_length=50).strip()
        password = data.get('password', '')

        if not username or not password:
            return jsonify({'error': 'Username and password are required'}), 400

        try:
            account = auth_service.authenticate(username, password)
            if account:
                login_user(user_class(account))
                logger.info(f"User {username} logged in via API")
                return jsonify({'success': True, 'username': account.username, 'role': account.role})

            return jsonify({'error': 'Invalid username or password'}), 401

        except Exception as e:
            logger.error(f"API login error: {e}")
            return jsonify({'error': 'Login failed'}), 500

    @blueprint.route('/logout')
    @login_required
    def logout():
        """Logout."""
        username = current_user.username
        logout_user()
        logger.info(f"User {username} logged out")
        flash('You have been logged out', 'success')
        return redirect(url_for('auth.login'))

    @blueprint.route('/api/logout', methods=['POST'])
    def api_logout():
        """API logout for dashboard clients."""
        if not current_user.is_authenticated:
            return jsonify({'success': True})
        username = current_user.username
        logout_user()
        logger.info(f"User {username} logged out via API")
        return jsonify({'success': True})

    @blueprint.route('/api/user/change-password', methods=['POST'])
    @login_required
    def change_password():
        """Change current user's password."""
        try:
            data = request.get_json(silent=True) or {}
            current_password = data.get('current_password', '')
            new_password = data.get('new_password', '')
            confirm_password = data.get('confirm_password', '')

            if not current_password or not new_password or not confirm_password:
                return jsonify({'error': 'All fields are required'}), 400

            if new_password != confirm_password:
                return jsonify({'error': 'New passwords do not match'}), 400

            auth_service.change_password(current_user.id, current_password, new_password)
            logger.info(f"User {current_user.username} changed their password")
            return jsonify({'success': True, 'message': 'Password changed successfully'})

        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error changing password: {e}")
            return jsonify({'error': 'Failed to change password'}), 500

    csrf.exempt(login)
    csrf.exempt(api_login)
    csrf.exempt(api_logout)
    csrf.exempt(change_password)

    return blueprint

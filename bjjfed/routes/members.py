from __future__ import annotations

from flask import Blueprint, jsonify, request

from bjjfed.models import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER
from bjjfed.routes.errors import error_response
from bjjfed.services.base import ServiceError
from bjjfed.utils.access import role_required, session_member
from bjjfed.utils.validators import validate_member_payload


def create_members_blueprint(*, member_service, store, csrf, logger):
    """Create teacher and student routes with injected dependencies."""
    blueprint = Blueprint('members', __name__)
    csrf.exempt(blueprint)

    def _payload(require_name: bool):
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        valid, error = validate_member_payload(data, require_name=require_name)
        return data, (None if valid else error)

    # Teachers

    @blueprint.route('/api/teachers', methods=['GET'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT)
    def list_teachers():
        """List teachers."""
        return jsonify([t.to_dict() for t in store.teachers()])

    @blueprint.route('/api/teachers', methods=['POST'])
    @role_required(ROLE_ADMIN)
    def create_teacher():
        """Register a teacher."""
        data, error = _payload(require_name=True)
        if error:
            return jsonify({'error': error}), 400
        try:
            teacher = member_service.create_teacher(data)
            return jsonify({'success': True, 'teacher': teacher.to_dict(), 'cloud_status': store.cloud_status}), 201
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to create teacher: {e}")
            return jsonify({'error': 'Failed to create teacher'}), 500

    @blueprint.route('/api/teachers/<teacher_id>', methods=['PUT'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER)
    def update_teacher(teacher_id):
        """Edit a teacher."""
        data, error = _payload(require_name=False)
        if error:
            return jsonify({'error': error}), 400
        try:
            teacher = member_service.update_teacher(session_member(), teacher_id, data)
            return jsonify({'success': True, 'teacher': teacher.to_dict(), 'cloud_status': store.cloud_status})
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to update teacher {teacher_id}: {e}")
            return jsonify({'error': 'Failed to update teacher'}), 500

    @blueprint.route('/api/teachers/<teacher_id>/toggle', methods=['POST'])
    @role_required(ROLE_ADMIN)
    def toggle_teacher(teacher_id):
        """Pause or reactivate a teacher."""
        try:
            teacher = member_service.toggle_teacher_status(teacher_id)
            return jsonify({'success': True, 'status': teacher.status, 'cloud_status': store.cloud_status})
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to toggle teacher {teacher_id}: {e}")
            return jsonify({'error': 'Failed to update teacher status'}), 500

    @blueprint.route('/api/teachers/<teacher_id>', methods=['DELETE'])
    @role_required(ROLE_ADMIN)
    def delete_teacher(teacher_id):
        """Remove a teacher locally and from the cloud."""
        try:
            member_service.delete_teacher(teacher_id)
            return jsonify({'success': True, 'cloud_status': store.cloud_status})
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to delete teacher {teacher_id}: {e}")
            return jsonify({'error': 'Failed to delete teacher'}), 500

    # Students

    @blueprint.route('/api/students', methods=['GET'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT)
    def list_students():
        """List the students visible to the current user."""
        students = member_service.visible_students(session_member())
        return jsonify([s.to_dict() for s in students])

    @blueprint.route('/api/students', methods=['POST'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER)
    def create_student():
        """Register a student."""
        data, error = _payload(require_name=True)
        if error:
            return jsonify({'error': error}), 400
        try:
            student = member_service.create_student(session_member(), data)
            return jsonify({'success': True, 'student': student.to_dict(), 'cloud_status': store.cloud_status}), 201
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to create student: {e}")
            return jsonify({'error': 'Failed to create student'}), 500

    @blueprint.route('/api/students/<student_id>', methods=['PUT'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT)
    def update_student(student_id):
        """Edit a student."""
        data, error = _payload(require_name=False)
        if error:
            return jsonify({'error': error}), 400
        try:
            student = member_service.update_student(session_member(), student_id, data)
            return jsonify({'success': True, 'student': student.to_dict(), 'cloud_status': store.cloud_status})
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to update student {student_id}: {e}")
            return jsonify({'error': 'Failed to update student'}), 500

    @blueprint.route('/api/students/<student_id>/toggle', methods=['POST'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER)
    def toggle_student(student_id):
        """Pause or reactivate a student."""
        try:
            student = member_service.toggle_student_status(session_member(), student_id)
            return jsonify({'success': True, 'status': student.status, 'cloud_status': store.cloud_status})
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to toggle student {student_id}: {e}")
            return jsonify({'error': 'Failed to update student status'}), 500

    @blueprint.route('/api/students/<student_id>', methods=['DELETE'])
    @role_required(ROLE_ADMIN, ROLE_TEACHER)
    def delete_student(student_id):
        """Remove a student locally and from the cloud."""
        try:
            member_service.delete_student(session_member(), student_id)
            return jsonify({'success': True, 'cloud_status': store.cloud_status})
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Failed to delete student {student_id}: {e}")
            return jsonify({'error': 'Failed to delete student'}), 500

    return blueprint

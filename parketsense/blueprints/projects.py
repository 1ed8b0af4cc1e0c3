"""Projects and their phases, with phase totals."""
from flask import Blueprint, jsonify
from parketsense.database import get_session
from parketsense.models import Project
from parketsense.services import project_service
from parketsense.services.pricing_service import calculate_phase_total
from parketsense.utils.http import json_payload
from parketsense.utils.serializers import serialize_project, serialize_phase, serialize_variant, serialize_summary

projects_bp = Blueprint('projects', __name__, url_prefix='/api')


def _phase_detail(phase):
    """Phase fields plus its live totals."""
    data = serialize_phase(phase)
    data['variants'] = [serialize_variant(v) for v in phase.variants]
    data['totals'] = serialize_summary(calculate_phase_total(phase))
    return data


@projects_bp.route('/projects', methods=['GET'])
def list_projects():
    session = get_session()
    projects = session.query(Project).order_by(Project.id.desc()).all()
    return jsonify({'projects': [serialize_project(p) for p in projects]})


@projects_bp.route('/projects', methods=['POST'])
def create_project():
    project = project_service.create_project(get_session(), json_payload())
    return jsonify(serialize_project(project)), 201


@projects_bp.route('/projects/<int:project_id>', methods=['GET'])
def get_project(project_id):
    project = project_service.get_project(get_session(), project_id)
    return jsonify(serialize_project(project))


@projects_bp.route('/projects/<int:project_id>', methods=['PATCH'])
def update_project(project_id):
    project = project_service.update_project(get_session(), project_id, json_payload())
    return jsonify(serialize_project(project))


@projects_bp.route('/projects/<int:project_id>/phases', methods=['GET'])
def list_phases(project_id):
    project = project_service.get_project(get_session(), project_id)
    return jsonify({'phases': [serialize_phase(p) for p in project.phases]})


@projects_bp.route('/projects/<int:project_id>/phases', methods=['POST'])
def create_phase(project_id):
    phase = project_service.create_phase(get_session(), project_id, json_payload())
    return jsonify(serialize_phase(phase)), 201


@projects_bp.route('/phases/<int:phase_id>', methods=['GET'])
def get_phase(phase_id):
    """Phase with its variants and computed totals (subtotal, discount, commission, total)."""
    phase = project_service.get_phase(get_session(), phase_id)
    return jsonify(_phase_detail(phase))


@projects_bp.route('/phases/<int:phase_id>', methods=['PATCH'])
def update_phase(phase_id):
    phase = project_service.update_phase(get_session(), phase_id, json_payload())
    return jsonify(_phase_detail(phase))

from flask import request, jsonify
from datetime import date
import logging

from . import app
from .breakdown import expand
from .errors import InvalidSchedule, ValidationError
from .helpers import found_or_404, json_body
from .models import default_availability_dict
from .progress import aggregate, deliverable_progress, group_by_due_date
from .schemas import ProjectCreate, ProjectUpdate
from .store import store
from .timeline import PlannedTask, availability_mask, distribute

logger = logging.getLogger(__name__)


def _availability_dict(project_id):
    availability = store.get_availability(project_id)
    if availability is None:
        return default_availability_dict(project_id)
    return availability.to_dict()


def project_details(project):
    deliverables = []
    for deliverable in project.deliverables:
        data = deliverable.to_dict(with_tasks=True)
        data["progress"] = deliverable_progress(deliverable).to_dict()
        deliverables.append(data)
    data = project.to_dict()
    data["deliverables"] = deliverables
    data["availability"] = _availability_dict(project.id)
    data["progress"] = aggregate(project.deliverables).to_dict()
    return data


@app.route("/api/projects", methods=["POST"])
def create_project():
    data = json_body()
    logger.debug(f"Create project payload: {data}")
    payload = ProjectCreate.model_validate(data)
    found_or_404(store.get_user(payload.user_id), "User", payload.user_id)
    project = store.create_project(
        name=payload.name,
        description=payload.description,
        user_id=payload.user_id,
        due_date=payload.due_date,
    )
    return jsonify(project.to_dict()), 201


@app.route("/api/projects", methods=["GET"])
def list_projects():
    user_id = request.args.get("userId", type=int)
    if user_id is None:
        raise ValidationError.for_field("userId", "userId query parameter must be an integer")
    projects = store.list_projects(user_id)
    logger.debug(f"Fetched {len(projects)} projects for user {user_id}")
    return jsonify([project.to_dict() for project in projects]), 200


@app.route("/api/projects/<int:id>", methods=["GET"])
def get_project(id):
    project = found_or_404(store.get_project(id), "Project", id)
    return jsonify(project.to_dict()), 200


@app.route("/api/projects/<int:id>", methods=["PUT"])
def update_project(id):
    found_or_404(store.get_project(id), "Project", id)
    payload = ProjectUpdate.model_validate(json_body())
    changes = payload.model_dump(exclude_unset=True)
    for field, alias in (("name", "name"), ("due_date", "dueDate")):
        if field in changes and changes[field] is None:
            raise ValidationError.for_field(alias, "must not be null")
    project = store.update_project(id, **changes)
    return jsonify(project.to_dict()), 200


@app.route("/api/projects/<int:id>", methods=["DELETE"])
def delete_project(id):
    found_or_404(store.get_project(id), "Project", id)
    store.delete_project(id)
    return "", 204


@app.route("/api/projects/<int:id>/details", methods=["GET"])
def get_project_details(id):
    project = found_or_404(store.get_project(id), "Project", id)
    return jsonify(project_details(project)), 200


@app.route("/api/projects/<int:id>/deliverables", methods=["GET"])
def list_project_deliverables(id):
    deliverables = store.list_deliverables(id)
    return jsonify([deliverable.to_dict() for deliverable in deliverables]), 200


@app.route("/api/projects/<int:id>/availability", methods=["GET"])
def get_project_availability(id):
    return jsonify(_availability_dict(id)), 200


@app.route("/api/projects/<int:id>/progress", methods=["GET"])
def get_project_progress(id):
    project = found_or_404(store.get_project(id), "Project", id)
    data = aggregate(project.deliverables).to_dict()
    data["deliverables"] = []
    for deliverable in project.deliverables:
        entry = deliverable_progress(deliverable).to_dict()
        entry.update({"id": deliverable.id, "name": deliverable.name, "isCompleted": deliverable.completed})
        data["deliverables"].append(entry)
    return jsonify(data), 200


@app.route("/api/projects/<int:id>/calendar", methods=["GET"])
def get_project_calendar(id):
    project = found_or_404(store.get_project(id), "Project", id)
    groups = group_by_due_date(project.deliverables)
    return jsonify([group.to_dict() for group in groups]), 200


@app.route("/api/projects/<int:id>/generate-timeline", methods=["POST"])
def generate_timeline(id):
    project = found_or_404(store.get_project(id), "Project", id)

    today = date.today()
    if project.due_date <= today:
        logger.error(f"Cannot schedule project {id}: due date {project.due_date} is not in the future")
        raise InvalidSchedule("Project due date must be in the future")

    mask = availability_mask(store.get_availability(id))
    if not any(mask):
        logger.error(f"Cannot schedule project {id}: no available days")
        raise InvalidSchedule("At least one day must be selected as available")

    # deliverables that already have tasks keep their schedule
    pending = [deliverable for deliverable in project.deliverables if not deliverable.tasks]
    planned = []
    for deliverable in pending:
        for template in expand(deliverable.name, deliverable.description):
            planned.append(PlannedTask(
                name=template.name,
                priority=template.priority,
                estimated_minutes=template.estimated_minutes,
                description=f"Part of: {deliverable.name}",
                deliverable_id=deliverable.id,
            ))

    if planned:
        store.add_scheduled_tasks(distribute(planned, project.due_date, mask, today=today))
    logger.info(f"Timeline generated for project {id}: {len(planned)} tasks across {len(pending)} deliverables")
    return jsonify(project_details(project)), 200

from flask import jsonify
import logging

from . import app
from .helpers import found_or_404, json_body
from .schemas import DeliverableCreate
from .store import store

logger = logging.getLogger(__name__)


@app.route("/api/deliverables", methods=["POST"])
def create_deliverable():
    data = json_body()
    logger.debug(f"Create deliverable payload: {data}")
    payload = DeliverableCreate.model_validate(data)
    found_or_404(store.get_project(payload.project_id), "Project", payload.project_id)
    deliverable = store.create_deliverable(
        project_id=payload.project_id,
        name=payload.name,
        description=payload.description,
        points=payload.points,
    )
    return jsonify(deliverable.to_dict()), 201


@app.route("/api/deliverables/<int:id>", methods=["DELETE"])
def delete_deliverable(id):
    found_or_404(store.get_deliverable(id), "Deliverable", id)
    store.delete_deliverable(id)
    return "", 204


@app.route("/api/deliverables/<int:id>/toggle", methods=["PATCH"])
def toggle_deliverable(id):
    deliverable = found_or_404(store.toggle_deliverable(id), "Deliverable", id)
    return jsonify(deliverable.to_dict(with_tasks=True)), 200


@app.route("/api/deliverables/<int:id>/tasks", methods=["GET"])
def list_deliverable_tasks(id):
    tasks = store.list_tasks(id)
    return jsonify([task.to_dict() for task in tasks]), 200

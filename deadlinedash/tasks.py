from flask import jsonify
import logging

from . import app
from .helpers import found_or_404, json_body
from .schemas import TaskCreate
from .store import store

logger = logging.getLogger(__name__)


@app.route("/api/tasks", methods=["POST"])
def create_task():
    data = json_body()
    logger.debug(f"Create task payload: {data}")
    payload = TaskCreate.model_validate(data)
    found_or_404(store.get_deliverable(payload.deliverable_id), "Deliverable", payload.deliverable_id)
    task = store.create_task(
        deliverable_id=payload.deliverable_id,
        name=payload.name,
        description=payload.description,
        due_date=payload.due_date,
        priority=payload.priority,
        estimated_minutes=payload.estimated_minutes,
    )
    logger.info(f"Task created: {task.name} under deliverable {task.deliverable_id}")
    return jsonify(task.to_dict()), 201


@app.route("/api/tasks/<int:id>/toggle", methods=["PATCH"])
def toggle_task(id):
    task = found_or_404(store.toggle_task(id), "Task", id)
    return jsonify(task.to_dict()), 200

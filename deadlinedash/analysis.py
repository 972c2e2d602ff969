from flask import jsonify
import logging

from . import app
from .breakdown import expand
from .errors import ValidationError
from .helpers import json_body
from .rubric import parse
from .schemas import RubricRequest, TimelinePreviewRequest
from .timeline import PlannedTask, availability_mask, build_timeline

logger = logging.getLogger(__name__)


@app.route("/api/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"}), 200


@app.route("/api/analyze-rubric", methods=["POST"])
def analyze_rubric():
    payload = RubricRequest.model_validate(json_body())
    deliverables = parse(payload.text)
    logger.debug(f"Rubric analysis found {len(deliverables)} deliverables")
    return jsonify({"deliverables": [d.to_dict() for d in deliverables]}), 200


@app.route("/api/timeline/preview", methods=["POST"])
def preview_timeline():
    """Schedule a rubric or deliverable list without storing anything."""
    payload = TimelinePreviewRequest.model_validate(json_body())
    if payload.deliverables:
        deliverables = payload.deliverables
    elif payload.text is not None:
        deliverables = parse(payload.text)
    else:
        raise ValidationError.for_field("deliverables", "Provide rubric text or a deliverable list")

    planned = []
    for position, deliverable in enumerate(deliverables):
        for template in expand(deliverable.name, deliverable.description):
            planned.append(PlannedTask(
                name=template.name,
                priority=template.priority,
                estimated_minutes=template.estimated_minutes,
                description=f"Part of: {deliverable.name}",
                deliverable_id=position,  # index into the request's deliverables
            ))

    mask = availability_mask(payload.availability.model_dump() if payload.availability else None)
    timeline = build_timeline(planned, payload.due_date, mask)
    logger.debug(f"Previewed {timeline.total_tasks} tasks for {len(deliverables)} deliverables")
    return jsonify(timeline.to_dict()), 200

from flask import jsonify
import logging

from . import app
from .helpers import found_or_404, json_body
from .models import WEEKDAYS
from .schemas import AvailabilityCreate
from .store import store

logger = logging.getLogger(__name__)


@app.route("/api/availability", methods=["POST"])
def save_availability():
    data = json_body()
    logger.debug(f"Availability payload: {data}")
    payload = AvailabilityCreate.model_validate(data)
    found_or_404(store.get_project(payload.project_id), "Project", payload.project_id)
    availability = store.upsert_availability(
        payload.project_id,
        hours_per_day=payload.hours_per_day,
        **{day: getattr(payload, day) for day in WEEKDAYS},
    )
    return jsonify(availability.to_dict()), 201

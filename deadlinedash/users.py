from flask import jsonify
import logging

from . import app
from .errors import ValidationError
from .helpers import found_or_404, json_body
from .schemas import UserCreate
from .store import store

logger = logging.getLogger(__name__)


# Users only own projects; there is no login or password hashing.
@app.route("/api/users", methods=["POST"])
def create_user():
    payload = UserCreate.model_validate(json_body())
    if store.get_user_by_username(payload.username) is not None:
        logger.error(f"Username already exists: {payload.username}")
        raise ValidationError.for_field("username", "Username already exists")
    user = store.create_user(payload.username, payload.password)
    return jsonify(user.to_dict()), 201


@app.route("/api/users/<int:id>", methods=["GET"])
def get_user(id):
    user = found_or_404(store.get_user(id), "User", id)
    return jsonify(user.to_dict()), 200

from flask import request

from .errors import NotFound, ValidationError


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError.for_field("body", "Request body must be a JSON object")
    return data


def found_or_404(entity, label, entity_id):
    if entity is None:
        raise NotFound(f"{label} {entity_id} not found")
    return entity

from flask import request

from jagacuan.errors import ValidationError


def get_body():
    """JSON body of the request as a dict"""
    body = request.get_json(force=True, silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body

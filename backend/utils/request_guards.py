from functools import wraps
from flask_jwt_extended import get_jwt_identity
from flask import jsonify, request


def current_user_id():
    # get_jwt_identity() returns a string (user id)
    return int(get_jwt_identity())


def require_fields(*fields):
    """Reject the request with 400 when any of the JSON body fields is missing or empty."""
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            data = request.get_json(silent=True) or {}
            missing = [field for field in fields if data.get(field) is None or data.get(field) == ""]
            if missing:
                return jsonify({"error": "Missing required data.", "missing_fields": missing}), 400
            return fn(*args, **kwargs)
        return decorator
    return wrapper


def self_only(fn):
    """Only let users act on their own <user_id> resource."""
    @wraps(fn)
    def decorator(*args, **kwargs):
        if kwargs.get("user_id") != current_user_id():
            return jsonify({"error": "Forbidden: You can only perform this action on your own account."}), 403
        return fn(*args, **kwargs)
    return decorator

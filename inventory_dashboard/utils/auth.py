from functools import wraps
from flask import session, jsonify


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not session.get("access_token"):
            return jsonify({"success": False, "message": "Authentication token not found"}), 401
        return view(*args, **kwargs)
    return wrapped

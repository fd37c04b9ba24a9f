from flask import Blueprint, request, jsonify
from inventory_dashboard.services.auth_service import AuthService

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    result = AuthService.login(
        (data.get("nim") or "").strip(),
        (data.get("password") or "").strip(),
    )
    return jsonify({"success": True, "message": "Login successful", "data": result})


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    user = AuthService.register(
        name=(data.get("name") or "").strip(),
        email=(data.get("email") or "").strip(),
        nim=(data.get("nim") or "").strip(),
        password=(data.get("password") or "").strip(),
    )
    return jsonify({"success": True, "message": "Registration successful", "data": user}), 201


@auth_bp.post("/logout")
def logout():
    AuthService.logout()
    return jsonify({"success": True, "message": "Logout successful"})

from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.web import json_body, make_guards
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFound, ValidationError
from ..container import Container


def _parse_role(value) -> Role:
    try:
        return Role(str(value).upper())
    except ValueError:
        raise ValidationError("Role must be ADMIN or EMPLOYEE")


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container)

    @app.route("/api/register", methods=["POST"], endpoint="register_user")
    def register_user():
        data = json_body()
        user = container.user_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
        )
        return jsonify(user.to_dict()), 201

    @app.route("/api/me", methods=["GET"], endpoint="current_user")
    @login_required
    def current_user():
        return jsonify(g.current_user.to_dict())

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return jsonify([u.to_dict() for u in container.user_service.list_users()])

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        active_only = request.args.get("active", "").lower() in {"1", "true", "yes"}
        return jsonify([u.to_dict() for u in container.user_service.list_employees(active_only=active_only)])

    @app.route("/api/users", methods=["POST"], endpoint="add_user")
    @admin_required
    def add_user():
        data = json_body()
        user = container.user_service.add_user(
            name=data.get("name", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
            role=_parse_role(data.get("role", Role.EMPLOYEE.value)),
        )
        return jsonify(user.to_dict()), 201

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    @login_required
    def get_user(user_id: int):
        if not g.current_user.is_admin and g.current_user.user_id != user_id:
            raise AuthorizationError("You can only view your own profile")
        user = container.user_service.get_user(user_id)
        if not user:
            raise NotFound("User does not exist")
        return jsonify(user.to_dict())

    @app.route("/api/users/<int:user_id>", methods=["PATCH"], endpoint="update_user")
    @admin_required
    def update_user(user_id: int):
        data = json_body()
        role = _parse_role(data["role"]) if data.get("role") is not None else None
        if role == Role.EMPLOYEE and user_id == g.current_user.user_id:
            raise ValidationError("You cannot remove your own administrator role")
        user = container.user_service.update_user(
            user_id,
            name=data.get("name"),
            email=data.get("email"),
            department=data.get("department"),
            role=role,
        )
        return jsonify(user.to_dict())

    @app.route("/api/users/<int:user_id>/toggle-status", methods=["POST"], endpoint="toggle_user_status")
    @admin_required
    def toggle_user_status(user_id: int):
        if user_id == g.current_user.user_id:
            raise ValidationError("You cannot deactivate your own account")
        user = container.user_service.toggle_status(user_id)
        return jsonify(user.to_dict())

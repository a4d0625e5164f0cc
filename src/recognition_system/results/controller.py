from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import make_guards
from ..core.exceptions import AuthorizationError, NotFound
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container)

    @app.route("/api/cycles/<int:cycle_id>/stats", methods=["GET"], endpoint="cycle_stats")
    @admin_required
    def cycle_stats(cycle_id: int):
        container.cycle_service.require_cycle(cycle_id)
        return jsonify([s.to_dict() for s in container.results_service.compute_stats(cycle_id)])

    @app.route("/api/cycles/<int:cycle_id>/leader", methods=["GET"], endpoint="cycle_leader")
    @admin_required
    def cycle_leader(cycle_id: int):
        container.cycle_service.require_cycle(cycle_id)
        leader = container.results_service.compute_leader(cycle_id)
        return jsonify(leader.to_dict() if leader else None)

    @app.route("/api/users/<int:user_id>/history", methods=["GET"], endpoint="employee_history")
    @login_required
    def employee_history(user_id: int):
        if not g.current_user.is_admin and g.current_user.user_id != user_id:
            raise AuthorizationError("You can only view your own history")
        if not container.user_service.get_user(user_id):
            raise NotFound("User does not exist")
        history = container.results_service.compute_employee_history(user_id)
        return jsonify([h.to_dict() for h in history])

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        cycle = container.cycle_service.get_active_cycle()
        summary = container.results_service.participation(g.current_user.user_id, cycle)
        return jsonify(summary.to_dict())

from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import int_field, json_body, make_guards
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container)

    @app.route("/api/cycles/<int:cycle_id>/nominations", methods=["POST"], endpoint="submit_nomination")
    @login_required
    def submit_nomination(cycle_id: int):
        data = json_body()
        nomination = container.nomination_service.submit(
            g.current_user.user_id,
            int_field(data, "nominee_id"),
            cycle_id,
            data.get("reason", ""),
        )
        return jsonify(nomination.to_dict()), 201

    @app.route("/api/cycles/<int:cycle_id>/nominations", methods=["GET"], endpoint="list_nominations")
    @admin_required
    def list_nominations(cycle_id: int):
        return jsonify([n.to_dict() for n in container.nomination_service.list_for_cycle(cycle_id)])

    @app.route("/api/cycles/<int:cycle_id>/nominations/mine", methods=["GET"], endpoint="my_nomination")
    @login_required
    def my_nomination(cycle_id: int):
        nomination = container.nomination_service.get_by_nominator(g.current_user.user_id, cycle_id)
        return jsonify(nomination.to_dict() if nomination else None)

    @app.route("/api/nominees", methods=["GET"], endpoint="eligible_nominees")
    @login_required
    def eligible_nominees():
        users = container.nomination_service.list_eligible_nominees(g.current_user.user_id)
        return jsonify([u.to_dict() for u in users])

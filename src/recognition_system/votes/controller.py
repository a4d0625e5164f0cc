from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.web import int_field, json_body, make_guards
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container)

    @app.route("/api/cycles/<int:cycle_id>/votes", methods=["POST"], endpoint="submit_vote")
    @login_required
    def submit_vote(cycle_id: int):
        data = json_body()
        vote = container.vote_service.submit(g.current_user.user_id, int_field(data, "nominee_id"), cycle_id)
        return jsonify(vote.to_dict()), 201

    @app.route("/api/cycles/<int:cycle_id>/votes", methods=["GET"], endpoint="list_votes")
    @admin_required
    def list_votes(cycle_id: int):
        return jsonify([v.to_dict() for v in container.vote_service.list_for_cycle(cycle_id)])

    @app.route("/api/cycles/<int:cycle_id>/votes/mine", methods=["GET"], endpoint="my_vote")
    @login_required
    def my_vote(cycle_id: int):
        vote = container.vote_service.get_by_voter(g.current_user.user_id, cycle_id)
        return jsonify(vote.to_dict() if vote else None)

    @app.route("/api/cycles/<int:cycle_id>/candidates", methods=["GET"], endpoint="list_candidates")
    @login_required
    def list_candidates(cycle_id: int):
        return jsonify([c.to_dict() for c in container.vote_service.list_candidates(cycle_id)])

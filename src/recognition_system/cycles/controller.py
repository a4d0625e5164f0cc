from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_datetime
from ..common.web import bool_field, int_field, json_body, make_guards
from ..core.enums import CycleStatus
from ..core.exceptions import InvalidPeriod, InvalidTransition, NotFound
from ..container import Container
from .model import PhaseWindows

_WINDOW_FIELDS = ("nomination_start", "nomination_end", "voting_start", "voting_end")


def _parse_windows(raw) -> Optional[PhaseWindows]:
    if not raw:
        return None
    if not isinstance(raw, dict):
        raise InvalidPeriod("windows must be an object")

    missing = [f for f in _WINDOW_FIELDS if not raw.get(f)]
    if missing:
        raise InvalidPeriod(f"Missing phase boundaries: {', '.join(missing)}")
    try:
        values = {f: parse_iso_datetime(str(raw[f])) for f in _WINDOW_FIELDS}
    except ValueError:
        raise InvalidPeriod("Phase boundaries must be ISO-8601 timestamps")
    return PhaseWindows(**values)


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container)

    @app.route("/api/cycles/active", methods=["GET"], endpoint="active_cycle")
    @login_required
    def active_cycle():
        cycle = container.cycle_service.get_active_cycle()
        return jsonify(cycle.to_dict() if cycle else None)

    @app.route("/api/cycles", methods=["GET"], endpoint="list_cycles")
    @login_required
    def list_cycles():
        return jsonify([c.to_dict() for c in container.cycle_service.list_cycles()])

    @app.route("/api/cycles/<int:cycle_id>", methods=["GET"], endpoint="get_cycle")
    @login_required
    def get_cycle(cycle_id: int):
        cycle = container.cycle_service.get_cycle(cycle_id)
        if not cycle:
            raise NotFound("Cycle does not exist")
        return jsonify(cycle.to_dict())

    @app.route("/api/cycles", methods=["POST"], endpoint="create_cycle")
    @admin_required
    def create_cycle():
        data = json_body()
        cycle = container.cycle_service.create_cycle(
            int_field(data, "month"),
            int_field(data, "year"),
            _parse_windows(data.get("windows")),
        )
        return jsonify(cycle.to_dict()), 201

    @app.route("/api/cycles/<int:cycle_id>/status", methods=["POST"], endpoint="advance_cycle_status")
    @admin_required
    def advance_cycle_status(cycle_id: int):
        data = json_body()
        try:
            new_status = CycleStatus(str(data.get("status", "")).upper())
        except ValueError:
            raise InvalidTransition("status must be NOMINATION, VOTING or CLOSED")
        cycle = container.cycle_service.advance_status(cycle_id, new_status, force=bool_field(data, "force"))
        return jsonify(cycle.to_dict())

    @app.route("/api/cycles/<int:cycle_id>/winner", methods=["POST"], endpoint="declare_winner")
    @admin_required
    def declare_winner(cycle_id: int):
        cycle = container.cycle_service.declare_winner(cycle_id)
        return jsonify(cycle.to_dict())

"""Shared helpers for the Flask controllers: auth guards, JSON input, error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CycleAlreadyActive,
    DomainError,
    DuplicateSubmission,
    InvalidTransition,
    NoVotesRecorded,
    NotFound,
    PhaseClosed,
    Unavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first.
_STATUS_BY_ERROR: tuple[tuple[type, int], ...] = (
    (DuplicateSubmission, 409),
    (PhaseClosed, 409),
    (CycleAlreadyActive, 409),
    (InvalidTransition, 409),
    (NoVotesRecorded, 409),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFound, 404),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"error": e.kind, "message": str(e)}), status_for(e)

    @app.errorhandler(Unavailable)
    def handle_unavailable(e: Unavailable):
        logger.error("Service unavailable: %s", e)
        return jsonify({"error": e.kind, "message": "The service is temporarily unavailable", "retry": True}), 503

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.name, "message": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "InternalError", "message": "Unexpected server error"}), 500


def make_guards(container):
    """Build ``login_required``/``admin_required`` bound to the user directory.

    The identity provider puts ``user_id`` into the session; role and status are
    re-read from the directory on every request.
    """

    def _load_current_user():
        user_id = session.get("user_id")
        if user_id is None:
            raise AuthenticationError("Please sign in to continue")
        try:
            user = container.user_service.require_active(int(user_id))
        except NotFound:
            session.clear()
            raise AuthenticationError("Please sign in to continue")
        g.current_user = user
        return user

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            _load_current_user()
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _load_current_user()
            if not user.is_admin:
                raise AuthorizationError("Administrator access required")
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def int_field(data: dict, name: str, *, required: bool = True) -> Optional[int]:
    value: Any = data.get(name)
    if value is None or value == "":
        if required:
            raise ValidationError(f"{name} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def bool_field(data: dict, name: str, *, default: bool = False) -> bool:
    value: Any = data.get(name)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false")
    return value

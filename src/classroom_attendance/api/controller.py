from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.enums import Role
from ..users.model import Identity
from .dispatcher import ActionDispatcher


def current_identity() -> Optional[Identity]:
    """Identity placed in the session by the external sign-in collaborator."""
    user_id = session.get("user_id")
    role = session.get("role")
    if not user_id or not role:
        return None
    try:
        return Identity(user_id=str(user_id), role=Role(role))
    except ValueError:
        return None


def register(app: Flask, container: Container) -> None:
    dispatcher = ActionDispatcher(container)

    @app.route("/ping", methods=["GET"], endpoint="ping")
    def ping():
        return "System Awake"

    @app.route("/api", methods=["POST"], endpoint="api")
    def api():
        data = dict(request.get_json(silent=True) or {})
        action = data.pop("action", None)
        envelope, status = dispatcher.dispatch(action, data, current_identity())
        return jsonify(envelope), status

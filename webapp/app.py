"""Web control panel for the hazmat room (trigger, override, telemetry)."""

import threading

from flask import Flask, jsonify, request

from controllers import RoomController
from controllers.access_control import OVERRIDE, is_authorized
from room_state import Role
from settings import load_settings

app = Flask(__name__)

room_lock = threading.Lock()
room = None


def _build_room(settings=None, scheduler=None, rng=None, auto_frames=True):
    return RoomController(
        settings if settings is not None else load_settings(),
        scheduler=scheduler,
        rng=rng,
        auto_frames=auto_frames,
    )


def init_room(settings=None, scheduler=None, rng=None, auto_frames=True):
    """Create (or replace) the room served by the panel."""
    global room

    with room_lock:
        if room is not None:
            room.cleanup()
        room = _build_room(settings, scheduler, rng, auto_frames)
        return room


def get_room():
    global room

    with room_lock:
        if room is None:
            room = _build_room()
        return room


def _payload():
    return request.get_json(silent=True) or {}


@app.route("/api/status")
def api_status():
    return jsonify(get_room().get_status())


@app.route("/api/trigger", methods=["POST"])
def api_trigger():
    current = get_room()
    current.force_trigger()
    return jsonify({"ok": True, "status": current.get_status()})


@app.route("/api/override", methods=["POST"])
def api_override():
    current = get_room()
    role = _payload().get("role", current.current_role)
    authorized = is_authorized(role, OVERRIDE)
    current.override(role)
    return jsonify({"ok": True, "authorized": authorized, "status": current.get_status()})


@app.route("/api/role", methods=["POST"])
def api_role():
    current = get_room()
    try:
        role = current.select_role(_payload().get("role"))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e), "roles": [r.value for r in Role]}), 400
    return jsonify({"ok": True, "role": role.value})


@app.route("/api/reading", methods=["POST"])
def api_reading():
    current = get_room()
    try:
        current.set_reading(_payload().get("value"))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    return jsonify({"ok": True, "status": current.get_status()})


@app.route("/api/tick", methods=["POST"])
def api_tick():
    current = get_room()
    try:
        delta = float(_payload().get("delta", 0.016))
    except (TypeError, ValueError):
        return jsonify({"ok": False, "error": "delta must be a number"}), 400
    physical = current.tick(delta)
    return jsonify({"ok": True, "physical": physical.to_dict()})


if __name__ == "__main__":
    settings = load_settings()
    web_cfg = settings.get("webapp", {})
    init_room(settings).start()
    app.run(host=web_cfg.get("host", "0.0.0.0"), port=int(web_cfg.get("port", 5000)), debug=False)

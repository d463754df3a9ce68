"""Flask service exposing gesture detection over HTTP.

Routes:
    POST /sign-language/detect                  match a hand observation
    GET  /sign-language/gestures                active gestures
    GET  /sign-language/gestures/<name>/quality training quality of a gesture
    GET  /sign-language/statistics              library summary

Example:
    >>> app = create_app(library_path="library.json")
    >>> app.run(port=5000)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, current_app, jsonify, request

from signbank.errors import GestureNotFoundError, LandmarkValidationError
from signbank.library import GestureLibrary
from signbank.matcher import GestureMatcher, MatcherConfig
from signbank.payloads import parse_detect_request
from signbank.quality import DEFAULT_MINIMUM_SAMPLES, evaluate_quality, library_statistics

logger = logging.getLogger(__name__)


def create_app(
    library: Optional[GestureLibrary] = None,
    library_path: Optional[str | Path] = None,
    config: Optional[MatcherConfig] = None,
) -> Flask:
    """Build the Flask app.

    Args:
        library: Library to serve. Takes precedence over ``library_path``.
        library_path: JSON library file to load. Defaults to
            ``signbank.paths.get_library_path()``; a missing default file
            yields an empty library.
        config: Matcher configuration (default: live detection settings).
    """
    if library is None:
        from signbank.persistence import load_library

        if library_path is not None:
            library = load_library(library_path)
        else:
            from signbank.paths import get_library_path

            default_path = get_library_path()
            if default_path.exists():
                library = load_library(default_path)
            else:
                logger.info("No library at %s, starting empty", default_path)
                library = GestureLibrary()

    app = Flask(__name__)
    app.extensions["signbank.library"] = library
    app.extensions["signbank.matcher"] = GestureMatcher(config)

    @app.post("/sign-language/detect")
    def detect():
        payload = request.get_json(silent=True)
        try:
            detect_request = parse_detect_request(payload)
        except LandmarkValidationError as e:
            return jsonify({
                "success": False,
                "error": "Validation failed",
                "messages": e.errors,
            }), 422

        try:
            result = _matcher().match(
                detect_request.hands,
                _library().candidates(),
                detect_request.hand_count,
            )
        except LandmarkValidationError as e:
            return jsonify({
                "success": False,
                "error": "Validation failed",
                "messages": e.errors,
            }), 422
        except Exception:
            logger.exception("Gesture detection error")
            return jsonify({
                "success": False,
                "error": "Detection failed",
                "message": "An error occurred during gesture detection. Please try again.",
            }), 500

        return jsonify(result.to_response())

    @app.get("/sign-language/gestures")
    def gestures():
        items = [
            {
                "id": g.gesture_id,
                "name": g.name,
                "label": g.label,
                "description": g.description,
                "supports_dual_hand": g.supports_dual_hand,
                "training_samples": len(g.validated_samples),
            }
            for g in _library().gestures
            if g.is_active
        ]
        return jsonify({"success": True, "gestures": items, "total_count": len(items)})

    @app.get("/sign-language/gestures/<name>/quality")
    def gesture_quality(name: str):
        minimum = request.args.get("minimum_samples", DEFAULT_MINIMUM_SAMPLES, type=int)
        try:
            gesture = _library().find_gesture(name)
        except GestureNotFoundError:
            return jsonify({
                "success": False,
                "error": "Gesture not found",
                "message": f"No gesture named '{name}'.",
            }), 404

        report = evaluate_quality(gesture, minimum_samples=minimum)
        return jsonify({
            "success": True,
            "gesture": gesture.to_summary(),
            "quality": report.to_dict(),
        })

    @app.get("/sign-language/statistics")
    def statistics():
        return jsonify({"success": True, "stats": library_statistics(_library().gestures)})

    return app


def _library() -> GestureLibrary:
    return current_app.extensions["signbank.library"]


def _matcher() -> GestureMatcher:
    return current_app.extensions["signbank.matcher"]


__all__ = ["create_app"]

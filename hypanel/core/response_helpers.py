"""Shared JSON response helpers for the panel API."""

from flask import jsonify

from hypanel.core.filesystem_utils import format_file_size


def ok_response(**payload):
    """Return a success payload carrying any extra fields."""
    body = {"ok": True}
    body.update(payload)
    return jsonify(body)


def error_response(error, message, status_code):
    """Return a standardized failure payload."""
    return jsonify({"ok": False, "error": error, "message": message}), status_code


def panel_error_response(exc):
    """Translate a ``PanelError`` into its JSON payload and status."""
    return jsonify(exc.to_payload()), exc.status_code


def upload_too_large_response(limit_bytes):
    return error_response(
        "upload_too_large",
        f"Upload exceeds the {format_file_size(limit_bytes)} limit.",
        413,
    )


def internal_error_response():
    """Return generic internal-error response payload."""
    return error_response("internal_error", "Internal server error.", 500)


def api_not_found_response():
    return error_response("not_found", "Unknown API endpoint.", 404)

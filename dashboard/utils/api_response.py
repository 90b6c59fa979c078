"""JSON envelope for the dose calculation API.

    Success: {"success": true, "data": ...}
    Error:   {"success": false, "error": ..., "errorType": ...}

``errorType`` is only present when the error is an exception, so the
treatment-planning frontend can tell a rejected request
(``InvalidDoseRequest``) from a failed calculation.
"""

from flask import jsonify


def api_success(data=None, message=None, status_code=200):
    """Wrap a calculation result in the success envelope."""
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return jsonify(body), status_code


def api_error(error, status_code=400):
    """Wrap an exception or message in the error envelope."""
    body = {"success": False, "error": str(error)}
    if isinstance(error, Exception):
        body["errorType"] = type(error).__name__
    return jsonify(body), status_code

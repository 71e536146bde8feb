"""
App-level error handlers.

Keeps error responses in the same shape the validating adapter uses:
{
    "errors": ["The requested URL was not found on the server. ..."]
}

Handles:
- HTTP exceptions (404, 405, 413, ...) with their own status codes
- Exceptions that escaped every error boundary (middleware faults, missing
  context fields): logged, answered with an empty 500
"""

from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from .error_boundary import default_error_handler


def setup_error_handlers(app: Flask) -> None:
    """
    Set up error handlers on the Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        """Render Flask/Werkzeug HTTP exceptions as {"errors": [...]}."""
        response = jsonify(errors=[error.description])
        response.status_code = error.code

        # 405 must keep its Allow header
        for name, value in error.get_headers():
            if name.lower() != 'content-type':
                response.headers[name] = value
        return response

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        """Log faults raised outside an error boundary."""
        return default_error_handler(error, g.get('request_context'))

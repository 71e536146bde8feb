"""
Request context middleware - open the RequestContext and echo X-Request-ID.

The context is opened before any router middleware runs, so every handler
and log line of the request shares one request id. The id comes from the
X-Request-ID header when the client sends one.
"""

from flask import Flask

from api.context import REQUEST_ID_HEADER, current_context


def setup_request_id_middleware(app: Flask) -> None:
    """
    Set up request context middleware on Flask app.

    Args:
        app: Flask application instance
    """

    @app.before_request
    def open_request_context():
        current_context()

    @app.after_request
    def add_request_id_header(response):
        response.headers[REQUEST_ID_HEADER] = current_context().request_id
        return response

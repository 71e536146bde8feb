import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name, default):
    return os.getenv(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


def _get_list(name, default=''):
    return [item.strip() for item in os.getenv(name, default).split(',') if item.strip()]


class Config:
    DEBUG = _get_bool('FLASK_DEBUG', False)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Development server (cli.py serve / app.run_app)
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', '5000'))

    # CORS - comma-separated origins, "*" for any
    CORS_ORIGINS = _get_list('CORS_ORIGINS', '*')

    # Request bodies over this size get 413 (100kb, like body-parser)
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_BODY_BYTES', str(100 * 1024)))

    # Request logging (api.middleware.request_logging)
    REQUEST_LOG_ENABLED = _get_bool('REQUEST_LOG_ENABLED', True)
    REQUEST_LOG_SAMPLE_RATE = float(os.getenv('REQUEST_LOG_SAMPLE_RATE', '1.0'))
    REQUEST_LOG_ENDPOINTS = _get_list('REQUEST_LOG_ENDPOINTS')

"""
API Routes

All route modules share one router (registered at the site root):
- users.py: user creation

Child routers for new areas hang off the shared router with
router.child("/prefix").
"""

from api.routing import TypedRouter

# Create the shared router
router = TypedRouter('routes', __name__)

# Import all route modules to register their routes with the router
from routes import users  # noqa: E402,F401

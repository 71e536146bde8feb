"""
User Routes

Includes:
- POST /user: validate {name, age} and echo the created user
"""
from flask import jsonify

from api.contracts import check_request
from api.contracts.pydantic_models import CreateUserRequest
from api.middleware import checked_error_boundary
from routes import router

# No persistence layer yet; every created user gets this id
PLACEHOLDER_USER_ID = 42


@checked_error_boundary
def create_user(ctx, checked):
    """Create a user with name and age"""
    body = checked.body
    return jsonify(id=PLACEHOLDER_USER_ID, name=body.name, age=body.age), 201


router.post("/user", check_request(CreateUserRequest, create_user))

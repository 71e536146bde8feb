"""
Pydantic request shapes for the example routes.

Usage:
    from api.contracts.pydantic_models import CreateUserRequest

    router.post("/user", check_request(CreateUserRequest, create_user))
"""

from .users import CreateUserBody, CreateUserRequest

__all__ = [
    'CreateUserBody',
    'CreateUserRequest',
]

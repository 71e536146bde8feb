"""
Pydantic models for /user endpoint requests.

Endpoints:
- POST /user - Create a user from a JSON body
"""

from pydantic import Field, StrictStr

from api.contracts.shape import Number, ShapeModel, request_shape


class CreateUserBody(ShapeModel):
    """Body of POST /user."""
    name: StrictStr = Field(..., description="Display name")
    age: Number = Field(..., description="Age in years")


CreateUserRequest = request_shape("CreateUserRequest", body=CreateUserBody)

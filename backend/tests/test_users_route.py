"""
POST /user endpoint tests (full app from create_app).

Tests:
1. Valid body -> 201 {"id": 42, "name": ..., "age": ...}
2. Invalid body -> 400 {"errors": [...]} naming the bad field
3. Request id, CORS and error envelope on the assembled app
"""

import logging


class TestCreateUser:

    def test_valid_body_creates_user(self, client):
        response = client.post("/user", json={"name": "Ada", "age": 30})

        assert response.status_code == 201
        body = response.get_json()
        assert body == {"id": 42, "name": "Ada", "age": 30}
        assert list(body) == ["id", "name", "age"]

    def test_fractional_age_kept(self, client):
        response = client.post("/user", json={"name": "Ada", "age": 30.5})

        assert response.status_code == 201
        assert response.get_json()["age"] == 30.5

    def test_extra_fields_ignored(self, client):
        response = client.post("/user", json={"name": "Ada", "age": 30, "admin": True})

        assert response.get_json() == {"id": 42, "name": "Ada", "age": 30}

    def test_form_body_age_is_string(self, client):
        # urlencoded values are always strings, never numbers
        response = client.post("/user", data={"name": "Ada", "age": "30"})

        assert response.status_code == 400
        assert all(m.startswith("body.age") for m in response.get_json()["errors"])

    def test_numeric_string_age_is_400(self, client):
        response = client.post("/user", json={"name": "Ada", "age": "30"})

        assert response.status_code == 400
        assert all(m.startswith("body.age") for m in response.get_json()["errors"])

    def test_boolean_age_is_400(self, client):
        response = client.post("/user", json={"name": "Ada", "age": True})

        assert response.status_code == 400
        assert all(m.startswith("body.age") for m in response.get_json()["errors"])

    def test_non_string_name_is_400(self, client):
        response = client.post("/user", json={"name": 7, "age": 30})

        assert response.status_code == 400
        assert response.get_json()["errors"][0].startswith("body.name")

    def test_missing_age_is_400(self, client):
        response = client.post("/user", json={"name": "Ada"})

        assert response.status_code == 400
        errors = response.get_json()["errors"]
        assert errors
        assert any("age" in message for message in errors)

    def test_wrong_type_is_400(self, client):
        response = client.post("/user", json={"name": "Ada", "age": "thirty"})

        assert response.status_code == 400
        assert all(m.startswith("body.age") for m in response.get_json()["errors"])

    def test_malformed_json_is_400(self, client):
        response = client.post("/user", data="{oops", content_type="application/json")

        assert response.status_code == 400
        assert response.get_json()["errors"][0].startswith("body")

    def test_validation_failure_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="api.contracts"):
            client.post("/user", json={})

        assert any(
            "shape=CreateUserRequest" in r.getMessage()
            for r in caplog.records if r.name == "api.contracts"
        )


class TestAppWiring:

    def test_request_id_echoed(self, client):
        response = client.post(
            "/user", json={"name": "Ada", "age": 30}, headers={"X-Request-ID": "abc-123"}
        )

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_generated(self, client):
        first = client.post("/user", json={})
        second = client.post("/user", json={})

        assert first.headers["X-Request-ID"]
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]

    def test_unknown_route_is_404_envelope(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert list(response.get_json()) == ["errors"]

    def test_wrong_method_is_405(self, client):
        response = client.get("/user")

        assert response.status_code == 405
        assert "POST" in response.headers["Allow"]

    def test_cors_exposes_request_id(self, client):
        response = client.post(
            "/user", json={"name": "Ada", "age": 30}, headers={"Origin": "http://example.test"}
        )

        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "X-Request-ID" in response.headers["Access-Control-Expose-Headers"]

    def test_cors_origin_list_is_enforced(self):
        from app import create_app

        class RestrictedConfig:
            TESTING = True
            CORS_ORIGINS = ["http://allowed.test"]

        client = create_app(RestrictedConfig).test_client()
        body = {"name": "Ada", "age": 30}

        allowed = client.post("/user", json=body, headers={"Origin": "http://allowed.test"})
        other = client.post("/user", json=body, headers={"Origin": "http://other.test"})

        assert allowed.headers["Access-Control-Allow-Origin"] == "http://allowed.test"
        assert "Access-Control-Allow-Origin" not in other.headers

    def test_oversized_body_is_413(self, client):
        response = client.post(
            "/user", data="x" * (100 * 1024 + 1), content_type="application/json"
        )

        assert response.status_code == 413
        assert "errors" in response.get_json()

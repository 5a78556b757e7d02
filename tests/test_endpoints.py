"""
Tests for endpoint descriptors.

Covers identity keys, URI parameter scanning, naming and URL expansion.
"""

import pytest

from endpoint_client.endpoints import Endpoint, HttpMethod, ReturnType
from endpoint_client.environment import Environment
from endpoint_client.errors import ConfigurationError, OperationArgumentError


# -----------------------------------------------------------------------------
# Identity Tests
# -----------------------------------------------------------------------------


class TestIdentityKey:
    """Tests for the registry identity key."""

    def test_unauthenticated_get(self):
        endpoint = Endpoint(method=HttpMethod.GET, location="version")
        assert endpoint.identity_key() == "get-version-unauthenticated"

    def test_post_with_api_key(self):
        endpoint = Endpoint(method="POST", location="login", api_key_required=True)
        assert endpoint.identity_key() == "post-login-unauthenticated-with-api-key"

    def test_authenticated(self):
        endpoint = Endpoint(method="get", location="student/{id}", authenticated=True)
        assert endpoint.identity_key() == "get-student/{id}-authenticated"

    def test_deterministic(self):
        a = Endpoint(method="GET", location="/version")
        b = Endpoint(method="GET", location="version")
        assert a.identity_key() == b.identity_key()

    def test_distinct_for_different_auth(self):
        keys = {
            Endpoint(method="GET", location="version").identity_key(),
            Endpoint(method="GET", location="version", authenticated=True).identity_key(),
            Endpoint(method="GET", location="version", api_key_required=True).identity_key(),
            Endpoint(method="POST", location="version", api_key_required=True).identity_key(),
        }
        assert len(keys) == 4


# -----------------------------------------------------------------------------
# Construction Tests
# -----------------------------------------------------------------------------


class TestEndpointConstruction:
    """Tests for normalization performed at construction."""

    def test_leading_slash_stripped(self):
        endpoint = Endpoint(method="GET", location="/student/{id}")
        assert endpoint.location == "student/{id}"

    def test_uri_params_scanned_in_order(self):
        endpoint = Endpoint(method="GET", location="school/{school}/student/{id}")
        assert endpoint.uri_params == ("school", "id")
        assert endpoint.has_uri_params()

    def test_single_uri_param(self):
        endpoint = Endpoint(method="GET", location="{id}")
        assert endpoint.uri_params == ("id",)
        assert not endpoint.is_path_compound()

    def test_compound_path(self):
        endpoint = Endpoint(method="GET", location="student/{id}")
        assert endpoint.is_path_compound()
        assert endpoint.uri_params == ("id",)

    def test_no_uri_params(self):
        endpoint = Endpoint(method="GET", location="version")
        assert endpoint.uri_params == ()
        assert not endpoint.has_uri_params()

    def test_method_parsed_case_insensitively(self):
        assert Endpoint(method="patch", location="x").method is HttpMethod.PATCH

    def test_unknown_method_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Endpoint(method="TRACE", location="x")
        assert "TRACE" in str(exc_info.value)

    def test_return_type_default(self):
        assert Endpoint(method="GET", location="x").return_type is ReturnType.BODY_AS_STRING

    def test_return_type_from_string(self):
        endpoint = Endpoint(method="GET", location="x", return_type="body_as_object")
        assert endpoint.return_type is ReturnType.BODY_AS_OBJECT

    def test_unknown_return_type_coerced(self):
        endpoint = Endpoint(method="GET", location="x", return_type="xml")
        assert endpoint.return_type is ReturnType.BODY_AS_STRING

    def test_additional_headers_immutable(self):
        endpoint = Endpoint(method="GET", location="x", additional_headers={"X-A": "1"})
        assert endpoint.has_additional_headers()
        with pytest.raises(TypeError):
            endpoint.additional_headers["X-B"] = "2"

    def test_basic_auth_encoding(self):
        endpoint = Endpoint(
            method="POST", location="login", encode_authorization=["username", "password"]
        )
        assert endpoint.requires_basic_auth_encoding()
        assert endpoint.encode_authorization == ("username", "password")

    @pytest.mark.parametrize("method, expected", [
        ("GET", False),
        ("HEAD", False),
        ("DELETE", False),
        ("POST", True),
        ("PUT", True),
        ("PATCH", True),
    ])
    def test_has_body(self, method, expected):
        assert Endpoint(method=method, location="x").has_body() is expected


# -----------------------------------------------------------------------------
# Naming Tests
# -----------------------------------------------------------------------------


class TestOperationName:
    """Tests for operation name derivation."""

    def test_location_string(self):
        endpoint = Endpoint(method="GET", location="student/{id}/courses")
        assert endpoint.location_string() == "student_{id}_courses"

    def test_default_name_is_location_string(self):
        endpoint = Endpoint(method="GET", location="app/version")
        assert endpoint.operation_name() == "app_version"
        assert not endpoint.has_explicit_name()

    def test_explicit_name(self):
        endpoint = Endpoint(method="GET", location="student/{id}", name="get_student")
        assert endpoint.operation_name() == "get_student"
        assert endpoint.has_explicit_name()


# -----------------------------------------------------------------------------
# URL Expansion Tests
# -----------------------------------------------------------------------------


class TestUrlExpansion:
    """Tests for URI template expansion against an environment."""

    def test_port_rendered(self):
        endpoint = Endpoint(method="GET", location="version")
        environment = Environment(scheme="http", host="127.0.0.1", port=1234)
        assert endpoint.expand_url(environment) == "http://127.0.0.1:1234/version"

    def test_default_http_port_omitted(self):
        endpoint = Endpoint(method="GET", location="version")
        environment = Environment(scheme="http", host="127.0.0.1", port=80)
        assert endpoint.expand_url(environment) == "http://127.0.0.1/version"

    def test_default_https_port_omitted(self):
        endpoint = Endpoint(method="GET", location="version")
        environment = Environment(scheme="https", host="api.example.com")
        assert endpoint.expand_url(environment) == "https://api.example.com/version"

    def test_compound_path_substitution(self):
        endpoint = Endpoint(method="GET", location="student/{id}/courses")
        environment = Environment(scheme="http", host="localhost", port=8080)
        url = endpoint.expand_url(environment, {"id": 7})
        assert url == "http://localhost:8080/student/7/courses"

    def test_simple_path_substitution(self):
        endpoint = Endpoint(method="GET", location="{id}")
        environment = Environment(scheme="https", host="api.example.com")
        assert endpoint.expand_url(environment, {"id": "abc"}) == "https://api.example.com/abc"

    def test_values_percent_encoded(self):
        endpoint = Endpoint(method="GET", location="student/{id}")
        assert endpoint.expand_path({"id": "a/b c"}) == "student/a%2Fb%20c"

    def test_repeated_placeholder_filled_everywhere(self):
        endpoint = Endpoint(method="GET", location="a/{id}/b/{id}")
        environment = Environment(scheme="http", host="h")
        assert endpoint.uri_params == ("id",)
        assert endpoint.expand_url(environment, {"id": 5}) == "http://h/a/5/b/5"

    def test_encoded_value_encoded_again(self):
        endpoint = Endpoint(method="GET", location="files/{path}")
        assert endpoint.expand_path({"path": "a%2Fb"}) == "files/a%252Fb"

    def test_braces_in_value_not_expanded(self):
        endpoint = Endpoint(method="GET", location="{a}/{b}")
        assert endpoint.expand_path({"a": "{b}", "b": "x"}) == "%7Bb%7D/x"

    def test_missing_param_raises(self):
        endpoint = Endpoint(method="GET", location="school/{school}/student/{id}")
        with pytest.raises(OperationArgumentError) as exc_info:
            endpoint.expand_path({"school": 1})
        assert "id" in str(exc_info.value)

    def test_missing_param_is_type_error(self):
        endpoint = Endpoint(method="GET", location="student/{id}")
        with pytest.raises(TypeError):
            endpoint.expand_path(None)

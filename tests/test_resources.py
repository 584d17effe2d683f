"""Tests for apilink.resources -- URL detection, placeholders, resource preparation."""

from __future__ import annotations

import pytest

from apilink.resources import is_url, prepare_resources, replace_placeholders, resolve_target


# ---------------------------------------------------------------------------
# is_url
# ---------------------------------------------------------------------------


class TestIsUrl:
    def test_none_is_not_url(self) -> None:
        assert is_url() is False
        assert is_url(None) is False

    def test_empty_string_is_not_url(self) -> None:
        assert is_url("") is False

    def test_relative_path_is_not_url(self) -> None:
        assert is_url("NotAnUrl") is False
        assert is_url("/users") is False

    @pytest.mark.parametrize("text", ["http://google.com", "https://google.com"])
    def test_http_and_https(self, text: str) -> None:
        assert is_url(text) is True

    def test_other_schemes_are_not_urls(self) -> None:
        assert is_url("ftp://example.com") is False


# ---------------------------------------------------------------------------
# replace_placeholders
# ---------------------------------------------------------------------------


class TestReplacePlaceholders:
    def test_none_url_returns_empty_string(self) -> None:
        assert replace_placeholders(None, {}) == ""

    def test_none_placeholders_returns_empty_string(self) -> None:
        assert replace_placeholders("https://google.com/search", None) == ""

    def test_empty_url_returns_empty_string(self) -> None:
        assert replace_placeholders("", {"a": "/b"}) == ""

    def test_empty_mapping_returns_url_unchanged(self) -> None:
        url = "https://google.com/search"
        assert replace_placeholders(url, {}) == url

    def test_switches_present_placeholder(self) -> None:
        url = "https://google.com/:placeholder/"
        assert replace_placeholders(url, {"placeholder": "/search"}) == "https://google.com/search/"

    def test_unmatched_keys_are_ignored(self) -> None:
        url = "https://google.com/:placeholder"
        assert replace_placeholders(url, {"other": "/x"}) == url

    def test_multiple_placeholders_accumulate(self) -> None:
        url = "https://x.com/:org/repos/:repo"
        result = replace_placeholders(url, {"org": "/acme", "repo": "/widgets"})
        assert result == "https://x.com/acme/repos/widgets"

    def test_only_first_occurrence_replaced(self) -> None:
        url = "https://x.com/:id/children/:id"
        assert replace_placeholders(url, {"id": "/7"}) == "https://x.com/7/children/:id"

    def test_token_requires_leading_slash(self) -> None:
        url = "https://x.com/items?sort=:field"
        assert replace_placeholders(url, {"field": "/name"}) == url

    def test_prefix_match_without_trailing_slash(self) -> None:
        assert replace_placeholders("/v1/:idx", {"id": "/9"}) == "/v1/9x"


# ---------------------------------------------------------------------------
# prepare_resources
# ---------------------------------------------------------------------------


class TestPrepareResources:
    def test_absolute_url_kept_regardless_of_base(self) -> None:
        urls = {"google": "https://google.com/search"}
        result = prepare_resources(urls, "https://api.example.com", None)
        assert result == {"google": "https://google.com/search"}

    def test_relative_path_concatenated_verbatim(self) -> None:
        urls = {"users": "/users", "raw": "users"}
        result = prepare_resources(urls, "https://api.example.com", None)
        assert result == {
            "users": "https://api.example.com/users",
            "raw": "https://api.example.comusers",
        }

    def test_placeholders_applied(self) -> None:
        result = prepare_resources({"key": "/:ph/value"}, "https://x.com", {"ph": "/a"})
        assert result == {"key": "https://x.com/a/value"}

    def test_placeholders_applied_to_absolute_urls(self) -> None:
        result = prepare_resources({"key": "https://other.com/:ph"}, "https://x.com", {"ph": "/a"})
        assert result == {"key": "https://other.com/a"}

    def test_none_base_url_treated_as_empty(self) -> None:
        assert prepare_resources({"users": "/users"}, None, None) == {"users": "/users"}

    def test_empty_config(self) -> None:
        assert prepare_resources(None, "https://x.com", None) == {}
        assert prepare_resources({}, "https://x.com", {"a": "/b"}) == {}

    def test_does_not_mutate_input(self) -> None:
        urls = {"key": "/:ph"}
        prepare_resources(urls, "https://x.com", {"ph": "/a"})
        assert urls == {"key": "/:ph"}


# ---------------------------------------------------------------------------
# resolve_target
# ---------------------------------------------------------------------------


class TestResolveTarget:
    RESOURCES = {"users": "https://api.example.com/users"}

    def test_known_resource(self) -> None:
        assert resolve_target(self.RESOURCES, "users") == "https://api.example.com/users"

    def test_path_appended_verbatim(self) -> None:
        result = resolve_target(self.RESOURCES, "users", "/42?full=1")
        assert result == "https://api.example.com/users/42?full=1"

    def test_unknown_resource_degrades_to_empty(self) -> None:
        assert resolve_target(self.RESOURCES, "missing") == ""

    def test_unknown_resource_with_path(self) -> None:
        assert resolve_target(self.RESOURCES, "missing", "/x") == "/x"

    def test_absolute_resource_bypasses_registry(self) -> None:
        assert resolve_target(self.RESOURCES, "https://other.com/a", "/b") == "https://other.com/a/b"

    def test_no_resources(self) -> None:
        assert resolve_target(None, "users") == ""

    def test_no_resource(self) -> None:
        assert resolve_target(self.RESOURCES, None) == ""

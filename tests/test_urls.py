import pytest

from core.urls import check_slashes_in_url, get_prod_app_id, path_segment, worker_url


class TestSlashes:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("http://worker:4002//api/global/users", "http://worker:4002/api/global/users"),
            ("https://worker.example.com///api//global", "https://worker.example.com/api/global"),
            ("http://worker:4002/api", "http://worker:4002/api"),
        ],
    )
    def test_check_slashes_in_url(self, url, expected):
        assert check_slashes_in_url(url) == expected

    def test_worker_url_handles_missing_and_duplicate_slashes(self):
        assert worker_url("http://worker:4002", "api/global/users") == (
            "http://worker:4002/api/global/users"
        )
        assert worker_url("http://worker:4002/", "/api/global/users") == (
            "http://worker:4002/api/global/users"
        )


class TestProdAppId:
    def test_dev_app_id_is_converted(self):
        assert get_prod_app_id("app_dev_abc123") == "app_abc123"

    def test_nested_dev_prefix_is_kept(self):
        assert get_prod_app_id("app_dev_app_dev_x") == "app_app_dev_x"

    def test_prod_app_id_is_unchanged(self):
        assert get_prod_app_id("app_abc123") == "app_abc123"
        assert get_prod_app_id("") == ""


class TestPathSegment:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("us_123", "us_123"),
            ("a/b", "a%2Fb"),
            ("id?x=1#f", "id%3Fx%3D1%23f"),
            (".", "%2E"),
            ("..", "%2E%2E"),
            ("...", "..."),
        ],
    )
    def test_path_segment(self, value, expected):
        assert path_segment(value) == expected

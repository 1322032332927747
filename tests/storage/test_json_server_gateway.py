"""Tests for the JSON data server backend."""

import pytest
import requests
import responses

from ridelink.exceptions import StorageError
from ridelink.storage.base import StaleRecordError
from ridelink.storage.json_server import JsonServerGateway

# Constants for testing
TEST_BASE_URL = "http://localhost:3000"


@pytest.fixture
def gateway():
    return JsonServerGateway(base_url=TEST_BASE_URL, timeout=1)


class TestJsonServerGateway:
    """Test class for the HTTP storage backend."""

    @responses.activate
    def test_find_by_id(self, gateway):
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/1",
                      json={"id": 1, "status": "PENDING", "version": 1}, status=200)

        assert gateway.find_by_id("rides", 1)["status"] == "PENDING"

    @responses.activate
    def test_find_by_id_missing(self, gateway):
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/9", json={"error": "not found"}, status=404)

        assert gateway.find_by_id("rides", 9) is None

    @responses.activate
    def test_find_by_sends_query(self, gateway):
        responses.add(
            responses.GET,
            f"{TEST_BASE_URL}/users/query",
            json=[{"id": 1, "email": "a@example.com"}],
            status=200,
            match=[responses.matchers.query_param_matcher({"email": "a@example.com"})],
        )

        assert gateway.find_by("users", email="a@example.com")[0]["id"] == 1

    @responses.activate
    def test_find_by_missing_collection(self, gateway):
        responses.add(responses.GET, f"{TEST_BASE_URL}/users/query", status=404)

        assert gateway.find_by("users", email="a@example.com") == []

    @responses.activate
    def test_find_all(self, gateway):
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides", json=[{"id": 1}, {"id": 2}], status=200)

        assert len(gateway.find_all("rides")) == 2

    @responses.activate
    def test_insert_posts(self, gateway):
        responses.add(responses.POST, f"{TEST_BASE_URL}/rides",
                      json={"id": 3, "status": "PENDING", "version": 1}, status=201)

        saved = gateway.save("rides", {"id": None, "status": "PENDING", "version": None})

        assert saved["id"] == 3
        assert responses.calls[0].request.method == "POST"

    @responses.activate
    def test_update_sends_version(self, gateway):
        responses.add(
            responses.PUT,
            f"{TEST_BASE_URL}/rides/3",
            json={"id": 3, "status": "ACCEPTED", "version": 2},
            status=200,
            match=[responses.matchers.header_matcher({"If-Match": "1"})],
        )

        saved = gateway.save("rides", {"id": 3, "status": "ACCEPTED", "version": 1})

        assert saved["version"] == 2

    @pytest.mark.parametrize("method,status", [
        (responses.PUT, 409),
        (responses.PUT, 404),
        (responses.POST, 409),
    ])
    @responses.activate
    def test_conflicts_become_stale_errors(self, gateway, method, status):
        url = f"{TEST_BASE_URL}/rides/3" if method == responses.PUT else f"{TEST_BASE_URL}/rides"
        responses.add(method, url, json={"error": "conflict"}, status=status)
        version = 1 if method == responses.PUT else None

        with pytest.raises(StaleRecordError):
            gateway.save("rides", {"id": 3, "version": version})

    @responses.activate
    def test_delete(self, gateway):
        responses.add(responses.DELETE, f"{TEST_BASE_URL}/rides/3", json={"id": 3}, status=200)
        responses.add(responses.DELETE, f"{TEST_BASE_URL}/rides/4", status=404)

        assert gateway.delete_by_id("rides", 3) is True
        assert gateway.delete_by_id("rides", 4) is False

    @responses.activate
    def test_server_error_becomes_storage_error(self, gateway):
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides", status=500)

        with pytest.raises(StorageError):
            gateway.find_all("rides")

    @responses.activate
    def test_connection_error_becomes_storage_error(self, gateway):
        responses.add(responses.GET, f"{TEST_BASE_URL}/rides/1",
                      body=requests.ConnectionError("refused"))

        with pytest.raises(StorageError):
            gateway.find_by_id("rides", 1)

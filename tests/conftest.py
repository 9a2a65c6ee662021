# tests/conftest.py
import json

import pytest

from tests.helpers import StubClient, location_payload


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    """Start every test without a credential in the environment"""
    monkeypatch.delenv("GEOIP_API_KEY", raising=False)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEOIP_API_KEY", "TEST_KEY")
    return "TEST_KEY"


@pytest.fixture
def data_file(tmp_path):
    """Path to a cache file holding one location for 1.2.3.4"""
    path = tmp_path / "geoip.json"
    path.write_text(json.dumps({"1.2.3.4": location_payload("1.2.3.4")}), encoding="utf-8")
    return path


@pytest.fixture
def stub_client():
    return StubClient()

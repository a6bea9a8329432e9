"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import patch
import tempfile
import shutil
import os

# Import the package modules
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.dirname(__file__))

import econdash as ed
from econdash.api import ApiClient
from econdash.gateway import EconomicDataGateway
from econdash.session import Session
from econdash.utils import MemoryTokenStore, TokenStore
from helpers import BASE_URL, FakeBackend, make_item


@pytest.fixture
def sample_series():
    """Five categories for MY (2019-2021, extra 2018 GDP, extra 2022 inflation) and SG."""
    years = [2019, 2020, 2021]
    my = {
        "gdp": [make_item(2018, 4.8)] + [make_item(y, v) for y, v in zip(years, [4.4, -5.5, 3.1])],
        "population": [make_item(y, v) for y, v in zip(years, [1.3, 1.2, 1.1])],
        "education": [make_item(y, v) for y, v in zip(years, [4.2, 4.5, 4.0])],
        "inflation": [make_item(y, v) for y, v in zip(years, [0.7, -1.1, 2.5])] + [make_item(2022, 3.4)],
        "labour": [make_item(y, v) for y, v in zip(years, [15800000, 15900000, 16100000])],
    }
    sg = {
        category: [make_item(y, v, "SG", "Singapore") for y, v in zip(years, [1.0, 2.0, 3.0])]
        for category in my
    }
    return {category: {"MY": my[category], "SG": sg[category]} for category in my}


@pytest.fixture
def sample_countries():
    return [
        {"code": "MY", "name": "Malaysia"},
        {"code": "SG", "name": "Singapore"},
        {"code": "TH", "name": "Thailand"},
    ]


@pytest.fixture
def backend(sample_series, sample_countries):
    return FakeBackend(series=sample_series, countries=sample_countries)


@pytest.fixture
def mock_request(backend):
    """Patch requests.request with the fake backend."""
    with patch('requests.request', side_effect=backend) as mocked:
        yield mocked


@pytest.fixture
def temp_token_dir():
    """Temporary directory for token files."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def token_store(temp_token_dir):
    return TokenStore(os.path.join(temp_token_dir, "access_token"))


@pytest.fixture
def session():
    """Authenticated in-memory session."""
    return Session(MemoryTokenStore("test-token"))


@pytest.fixture
def api(session):
    return ApiClient(session, BASE_URL)


@pytest.fixture
def gateway(api):
    return EconomicDataGateway(api)


@pytest.fixture
def client(temp_token_dir):
    """EconDashClient with a throwaway token file."""
    return ed.EconDashClient(
        base_url=BASE_URL,
        token_path=os.path.join(temp_token_dir, "access_token"),
    )


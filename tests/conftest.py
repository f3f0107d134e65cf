"""
Pytest configuration file for the market admin project.
This file sets up the Python path so tests can import modules from the project root,
and provides shared fixtures for row sets, repositories and session state.
"""
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config import ApiConfig
from domain.models import Market, PersistedSubgroup, Region, SubgroupRow


@pytest.fixture
def api_config():
    return ApiConfig(base_url="https://api.test/api", timeout=5.0, verify_ssl=False)


@pytest.fixture
def make_row():
    """Factory for SubgroupRow with sensible defaults."""
    def _make(code="", name="", market_code="BB", identifier=None, market_identifier=None, **kwargs):
        return SubgroupRow(
            identifier=identifier,
            market_identifier=market_identifier,
            market_code=market_code,
            subgroup_code=code,
            subgroup_name=name,
            **kwargs,
        )
    return _make


@pytest.fixture
def persisted_subgroups():
    """Backend subgroups of two markets."""
    return [
        PersistedSubgroup(identifier=11, market_code="BB", subgroup_code="A", subgroup_name="ALPHA"),
        PersistedSubgroup(identifier=12, market_code="BB", subgroup_code="B", subgroup_name="BRAVO"),
        PersistedSubgroup(identifier=21, market_code="CC", subgroup_code="A", subgroup_name="ALPHA"),
    ]


@pytest.fixture
def regions():
    return [
        Region(key=1, value="Europe"),
        Region(key=2, value="Latin America, Asia Pacific, Africa"),
        Region(key=3, value="America, Canada"),
    ]


@pytest.fixture
def sample_market():
    """A persisted market with two subgroups, as returned by Market/{id}."""
    return Market(
        identifier=4,
        name="Benelux",
        code="BB",
        long_code="EXXXXBB",
        region="1",
        sub_region="7",
        subgroups=(
            SubgroupRow(identifier=11, market_identifier=4, market_code="BB", subgroup_code="A", subgroup_name="ALPHA"),
            SubgroupRow(identifier=12, market_identifier=4, market_code="BB", subgroup_code="B", subgroup_name="BRAVO"),
        ),
    )


@pytest.fixture
def mock_market_repo():
    """Mock MarketRepository for service tests."""
    repo = Mock()
    repo.code_exists.return_value = False
    repo.name_exists.return_value = False
    repo.create_market.return_value = 99
    return repo


@pytest.fixture
def mock_subgroup_repo():
    """Mock SubgroupRepository for service tests."""
    repo = Mock()
    repo.list_all.return_value = []
    repo.get_subgroups.return_value = []
    return repo


@pytest.fixture
def mock_region_repo(regions):
    """Mock RegionRepository for service tests."""
    repo = Mock()
    repo.get_all_regions.return_value = regions
    repo.get_subregions.return_value = [Region(key=7, value="Benelux")]
    return repo


@pytest.fixture
def fake_session_state(monkeypatch):
    """Replace st.session_state with a plain dict for state/ui helpers."""
    import streamlit as st

    state = {}
    monkeypatch.setattr(st, "session_state", state)
    return state

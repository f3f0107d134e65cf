"""
Tests for SubgroupRepository and RegionRepository

Tests the MarketSubgroup and Region endpoints with a mocked requests
session, including the region fallback to settings.toml.
"""
import pytest
from unittest.mock import Mock, patch

from domain.models import PersistedSubgroup, Region, SubgroupRow
from repositories.base import ApiError
from repositories.region_repo import RegionRepository, fallback_regions
from repositories.subgroup_repo import SubgroupRepository


def _response(payload, status=200):
    response = Mock()
    response.status_code = status
    response.content = b"x" if payload is not None else b""
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock()


class TestSubgroupRepository:
    def test_get_subgroups_fills_market_identifier(self, api_config, session):
        session.request.return_value = _response([
            {"subGroupId": 11, "subGroupCode": "a", "subGroupName": "alpha"},
            {"subGroupId": 12, "marketId": 4, "marketCode": "BB", "subGroupCode": "B", "subGroupName": "BRAVO"},
        ])
        repo = SubgroupRepository(api_config, session=session)

        rows = repo.get_subgroups(4, "bb")

        assert session.request.call_args.kwargs["params"] == {"marketId": 4}
        assert [r.market_identifier for r in rows] == [4, 4]
        assert rows[0].market_code == "BB"
        assert rows[0].subgroup_code == "A"
        assert all(r.is_persisted for r in rows)

    def test_list_all(self, api_config, session):
        session.request.return_value = _response([
            {"subGroupId": 11, "marketCode": "BB", "subGroupCode": "A", "subGroupName": "ALPHA"},
        ])
        repo = SubgroupRepository(api_config, session=session)

        assert repo.list_all() == [
            PersistedSubgroup(identifier=11, market_code="BB", subgroup_code="A", subgroup_name="ALPHA")
        ]
        assert session.request.call_args.kwargs["params"] is None

    def test_list_all_empty_body(self, api_config, session):
        session.request.return_value = _response(None, status=204)
        assert SubgroupRepository(api_config, session=session).list_all() == []

    def test_create_and_update(self, api_config, session):
        row = SubgroupRow(market_identifier=4, market_code="BB", subgroup_code="C", subgroup_name="CHARLIE")
        session.request.return_value = _response({"subGroupId": 13, "marketId": 4, "marketCode": "BB",
                                                  "subGroupCode": "C", "subGroupName": "CHARLIE"})
        repo = SubgroupRepository(api_config, session=session)

        created = repo.create_subgroup(row)
        assert created.identifier == 13
        assert session.request.call_args.kwargs["json"]["subGroupId"] == 0

        repo.update_subgroup(13, created)
        args, kwargs = session.request.call_args
        assert args[0] == "PUT"
        assert args[1].endswith("/MarketSubgroup/13")
        assert kwargs["json"]["subGroupId"] == 13

    def test_delete_not_found(self, api_config, session):
        session.request.return_value = _response(None, status=404)
        with pytest.raises(ApiError) as exc_info:
            SubgroupRepository(api_config, session=session).delete_subgroup(99)
        assert exc_info.value.is_not_found


class TestRegionRepository:
    def test_get_all_regions(self, api_config, session):
        session.request.return_value = _response([{"key": 1, "value": "Europe"}, {"key": 2, "value": "LAAPA"}])
        repo = RegionRepository(api_config, session=session)

        regions = repo.get_all_regions(use_cache=False)

        assert regions == [Region(1, "Europe"), Region(2, "LAAPA")]
        assert session.request.call_args.args[1].endswith("/Region/all-regions")

    def test_get_all_regions_falls_back_to_settings(self, api_config, session):
        session.request.return_value = _response(None, status=503)
        repo = RegionRepository(api_config, session=session)

        regions = repo.get_all_regions(use_cache=False)

        assert [r.key for r in regions] == [1, 2, 3]
        assert regions[0].value == "Europe"

    def test_get_all_regions_without_fallback_raises(self, api_config, session):
        session.request.return_value = _response(None, status=503)
        with pytest.raises(ApiError):
            RegionRepository(api_config, session=session).get_all_regions(use_cache=False, fallback=False)

    def test_get_subregions(self, api_config, session):
        session.request.return_value = _response([{"key": 7, "value": "Benelux"}])
        repo = RegionRepository(api_config, session=session)

        assert repo.get_subregions(1, use_cache=False) == [Region(7, "Benelux")]
        assert session.request.call_args.args[1].endswith("/Region/1/subregions")

    def test_get_subregions_failure_returns_empty(self, api_config, session):
        session.request.return_value = _response(None, status=500)
        assert RegionRepository(api_config, session=session).get_subregions(1, use_cache=False) == []

    @patch("repositories.region_repo._get_all_regions_cached")
    def test_cached_path(self, mock_cached, api_config, session):
        mock_cached.return_value = [Region(1, "Europe")]
        repo = RegionRepository(api_config, session=session)

        assert repo.get_all_regions() == [Region(1, "Europe")]
        session.request.assert_not_called()

    def test_fallback_regions_sorted_by_key(self):
        assert [r.key for r in fallback_regions()] == [1, 2, 3]

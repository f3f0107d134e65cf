"""
Domain Models

Dataclasses representing markets, regions and subgroups as exchanged with
the backend API.

Design Principles:
1. Factory methods - Clean construction from API payloads (from_api)
2. Serialization - to_api() writes the backend's camelCase keys
3. Computed properties - Business logic encapsulated in the model
4. Immutability where possible - SubgroupRow is the exception, the
   row-set validator mutates rows in place so UI bindings stay stable
"""

from dataclasses import dataclass, field
from typing import Optional

from domain.converters import safe_int, safe_optional_int, safe_str, safe_upper
from domain.enums import RowState


# Type aliases for clarity
MarketID = int
SubgroupID = int


# =============================================================================
# SubgroupRow - one editable subgroup entry in a market form
# =============================================================================

@dataclass
class SubgroupRow:
    """
    A candidate subgroup entry inside a market form session.

    Attributes:
        identifier: Backend subGroupId, None for rows not yet persisted
        market_identifier: Backend marketId of the owning market
        market_code: Two-letter code copied from the parent form
        subgroup_code: Single alphanumeric character, uppercased
        subgroup_name: Subgroup name, uppercased
        marked_deleted: Soft-delete flag, the row keeps its slot
        marked_edited: True once a persisted row's code or name changed
        key: Stable per-session key for widget binding (not sent to the API)
    """
    identifier: Optional[SubgroupID] = None
    market_identifier: Optional[MarketID] = None
    market_code: str = ""
    subgroup_code: str = ""
    subgroup_name: str = ""
    marked_deleted: bool = False
    marked_edited: bool = False
    key: str = ""

    @classmethod
    def from_api(cls, payload: dict, market_code: str = "") -> "SubgroupRow":
        """
        Factory method to create a SubgroupRow from a backend subgroup dict.

        Args:
            payload: Dict with subGroupId/marketId/marketCode/subGroupCode/subGroupName
            market_code: Parent market code used when the payload has none

        Returns:
            A new SubgroupRow (not deleted, not edited)
        """
        return cls(
            identifier=safe_optional_int(payload.get("subGroupId")),
            market_identifier=safe_optional_int(payload.get("marketId")),
            market_code=safe_upper(payload.get("marketCode")) or safe_upper(market_code),
            subgroup_code=safe_upper(payload.get("subGroupCode")),
            subgroup_name=safe_upper(payload.get("subGroupName")),
        )

    def to_api(self) -> dict:
        """Serialize to the backend shape. New rows are sent with subGroupId 0."""
        return {
            "subGroupId": self.identifier or 0,
            "marketId": self.market_identifier,
            "marketCode": self.market_code,
            "subGroupCode": self.subgroup_code,
            "subGroupName": self.subgroup_name,
        }

    @property
    def is_persisted(self) -> bool:
        """True if the row came from the backend."""
        return self.identifier is not None

    @property
    def state(self) -> RowState:
        """Current lifecycle state of the row."""
        if self.marked_deleted:
            return RowState.DELETED
        if not self.is_persisted:
            return RowState.NEW
        if self.marked_edited:
            return RowState.EDITED
        return RowState.PERSISTED

    @property
    def formatted_code(self) -> str:
        """Market code + subgroup code, e.g. 'BBA'."""
        return f"{self.market_code.upper()}{self.subgroup_code}"


# =============================================================================
# PersistedSubgroup - read-only uniqueness cross-check entry
# =============================================================================

@dataclass(frozen=True)
class PersistedSubgroup:
    """
    A subgroup already stored in the backend.

    Used as ground truth for duplicate checks against rows that are not part
    of the current form session.
    """
    identifier: Optional[SubgroupID]
    market_code: str
    subgroup_code: str
    subgroup_name: str

    @classmethod
    def from_api(cls, payload: dict) -> "PersistedSubgroup":
        return cls(
            identifier=safe_optional_int(payload.get("subGroupId")),
            market_code=safe_upper(payload.get("marketCode")),
            subgroup_code=safe_upper(payload.get("subGroupCode")),
            subgroup_name=safe_upper(payload.get("subGroupName")),
        )


# =============================================================================
# Region
# =============================================================================

@dataclass(frozen=True)
class Region:
    """A region or sub-region option as returned by the Region endpoints."""
    key: int
    value: str

    @classmethod
    def from_api(cls, payload: dict) -> "Region":
        return cls(key=safe_int(payload.get("key")), value=safe_str(payload.get("value")))

    @property
    def initial(self) -> str:
        """First letter of the region name, uppercased (used in long codes)."""
        return self.value[:1].upper()


# =============================================================================
# Market
# =============================================================================

@dataclass(frozen=True)
class Market:
    """
    A market and its subgroups.

    Attributes:
        identifier: Backend market id, None before creation
        name: Market name
        code: Two-letter market code
        long_code: Derived long market code (region initial + XXXX + code)
        region: Region key as stored by the backend
        sub_region: Optional sub-region key
        subgroups: Subgroups belonging to the market
    """
    identifier: Optional[MarketID]
    name: str
    code: str
    long_code: str = ""
    region: str = ""
    sub_region: str = ""
    subgroups: tuple[SubgroupRow, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, payload: dict) -> "Market":
        """
        Factory method accepting both the list shape (id/name/code/...) and
        the details shape (marketId/marketName/marketCode/...).
        """
        code = safe_upper(payload.get("code", payload.get("marketCode")))
        raw_subgroups = payload.get("marketSubGroups") or []
        return cls(
            identifier=safe_optional_int(payload.get("id", payload.get("marketId"))),
            name=safe_str(payload.get("name", payload.get("marketName"))),
            code=code,
            long_code=safe_str(payload.get("longMarketCode")),
            region=safe_str(payload.get("region")),
            sub_region=safe_str(payload.get("subRegion")),
            subgroups=tuple(SubgroupRow.from_api(s, market_code=code) for s in raw_subgroups),
        )

    def to_api(self) -> dict:
        """Serialize to the backend market shape."""
        payload = {
            "name": self.name,
            "code": self.code,
            "longMarketCode": self.long_code,
            "region": self.region,
            "subRegion": self.sub_region,
            "marketSubGroups": [s.to_api() for s in self.subgroups],
        }
        if self.identifier is not None:
            payload["id"] = self.identifier
        return payload

    @property
    def formatted_subgroup_codes(self) -> list[str]:
        """Each subgroup as market code + subgroup code (e.g. ['BBA', 'BB1'])."""
        return [s.formatted_code for s in self.subgroups]

    @property
    def subgroup_codes(self) -> str:
        """Space-separated raw subgroup codes."""
        return " ".join(s.subgroup_code for s in self.subgroups)


@dataclass(frozen=True)
class MarketPage:
    """One page of the market list."""
    markets: tuple[Market, ...]
    total_records: int

    @classmethod
    def from_api(cls, payload) -> "MarketPage":
        """Accept either {'markets': [...], 'totalRecords': n} or a bare list."""
        if isinstance(payload, dict):
            items = payload.get("markets") or []
            total = safe_int(payload.get("totalRecords"), len(items))
        else:
            items = payload or []
            total = len(items)
        return cls(markets=tuple(Market.from_api(m) for m in items), total_records=total)

"""
Domain Enums

Enumerations for categorical data used by the market and subgroup forms.
These replace magic strings and provide type safety.
"""

from enum import Enum, IntEnum, auto


class RegionCode(IntEnum):
    """
    Built-in region keys as used by the backend.

    The API is the source of truth for region names; these values are the
    fallback when the region endpoint is unreachable and the option list for
    the market list filter.
    """
    EURO = 1
    LAAPA = 2
    NOAM = 3

    @property
    def display_name(self) -> str:
        """Return the short region name."""
        return {
            RegionCode.EURO: "Europe",
            RegionCode.LAAPA: "Latin America, Asia Pacific, Africa",
            RegionCode.NOAM: "America, Canada",
        }[self]

    @property
    def full_form(self) -> str:
        """Return the label shown in region pickers (e.g. 'EURO - Europe')."""
        return {
            RegionCode.EURO: "EURO - Europe",
            RegionCode.LAAPA: "LAAPA - Latin America, Asia Pacific, and Africa",
            RegionCode.NOAM: "NOAM - North America",
        }[self]

    @classmethod
    def from_key(cls, key) -> "RegionCode":
        """
        Convert a region key (int or numeric string) to RegionCode.

        Raises:
            ValueError: If key doesn't match a known region

        Example:
            >>> RegionCode.from_key("2")
            <RegionCode.LAAPA: 2>
        """
        try:
            return cls(int(key))
        except (TypeError, ValueError):
            raise ValueError(
                f"Invalid region key: {key}. "
                f"Must be one of: {', '.join(str(int(r)) for r in cls)}"
            ) from None


class SubgroupField(Enum):
    """Editable fields of a subgroup row (values match the API keys)."""
    SUBGROUP_CODE = "subgroupCode"
    SUBGROUP_NAME = "subgroupName"

    @classmethod
    def parse(cls, field) -> "SubgroupField":
        """
        Accept either a SubgroupField or its string value.

        Raises:
            ValueError: For any other field name. Market code is not
                editable per row, it follows the parent form.
        """
        if isinstance(field, cls):
            return field
        for member in cls:
            if field in (member.value, member.name):
                return member
        raise ValueError(
            f"Invalid subgroup field: {field}. "
            f"Must be one of: {', '.join(m.value for m in cls)}"
        )


class SubgroupViolation(Enum):
    """Per-row validation failures reported by the row-set validator."""
    REQUIRED_CODE = auto()
    REQUIRED_NAME = auto()
    INVALID_CODE_FORMAT = auto()
    DUPLICATE_CODE = auto()
    DUPLICATE_NAME = auto()

    @property
    def field(self) -> SubgroupField:
        """Return the field the violation is displayed under."""
        if self in (SubgroupViolation.REQUIRED_NAME, SubgroupViolation.DUPLICATE_NAME):
            return SubgroupField.SUBGROUP_NAME
        return SubgroupField.SUBGROUP_CODE

    @property
    def message(self) -> str:
        """Return the user-facing message."""
        return {
            SubgroupViolation.REQUIRED_CODE: "Subgroup code is required.",
            SubgroupViolation.REQUIRED_NAME: "Subgroup name is required.",
            SubgroupViolation.INVALID_CODE_FORMAT: "Subgroup code must be a single letter or digit.",
            SubgroupViolation.DUPLICATE_CODE: "Subgroup code already exists for this market.",
            SubgroupViolation.DUPLICATE_NAME: "Subgroup name already exists for this market.",
        }[self]


class RowState(Enum):
    """
    Lifecycle state of a subgroup row.

    NEW -> DELETED, PERSISTED -> EDITED -> DELETED. DELETED is terminal.
    """
    NEW = auto()
    PERSISTED = auto()
    EDITED = auto()
    DELETED = auto()


class MarketViolation(Enum):
    """Validation failures for the market form itself."""
    REQUIRED_NAME = auto()
    REQUIRED_CODE = auto()
    INVALID_CODE_FORMAT = auto()
    INVALID_CODE_LENGTH = auto()
    CODE_EXISTS = auto()
    NAME_EXISTS = auto()
    REQUIRED_REGION = auto()
    INVALID_LONG_CODE = auto()
    SUBGROUP_ERRORS = auto()

    @property
    def message(self) -> str:
        """Return the user-facing message."""
        return {
            MarketViolation.REQUIRED_NAME: "Market name is required.",
            MarketViolation.REQUIRED_CODE: "Market code is required.",
            MarketViolation.INVALID_CODE_FORMAT: "Market code may only contain letters.",
            MarketViolation.INVALID_CODE_LENGTH: "Market code must be exactly 2 characters.",
            MarketViolation.CODE_EXISTS: "Market code already exists.",
            MarketViolation.NAME_EXISTS: "Market name already exists.",
            MarketViolation.REQUIRED_REGION: "Region is required.",
            MarketViolation.INVALID_LONG_CODE: "Long market code must be 7 to 20 characters.",
            MarketViolation.SUBGROUP_ERRORS: "Fix the subgroup errors before saving.",
        }[self]

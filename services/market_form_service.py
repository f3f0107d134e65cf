"""
Market Form Service

Business logic behind the create/edit market page: field state, long code
derivation, uniqueness checks against the backend, the subgroup row set,
and submission.

Design:
- Receives Market/Subgroup/Region repositories via DI
- Owns exactly one SubgroupRowSet and only reads what it emits
- API failures are logged and turned into SubmitResult / notifications
- No Streamlit imports (service layer rule)
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional

from domain.enums import MarketViolation, RegionCode
from domain.market_rules import (
    build_long_code,
    normalize_market_code,
    subgroup_sort_key,
    validate_market_fields,
)
from domain.models import Market, Region
from logging_config import setup_logging
from repositories.base import ApiError
from repositories.market_repo import invalidate_market_caches
from services.subgroup_row_service import RowSetChange, SubgroupRowSet

logger = setup_logging(__name__, log_file="market_form_service.log")

TITLE_CREATE = "Create Market"
TITLE_EDIT = "Edit Market"
MARKET_CREATED = "Market created successfully"
MARKET_UPDATED = "Market updated successfully"
CREATE_FAILED = "An error occurred while creating the market"
UPDATE_FAILED = "An error occurred while updating the market"
LOAD_FAILED = "An error occurred while loading the market"
FORM_INVALID = "Please correct the highlighted fields before saving."


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of MarketFormService.submit()."""
    ok: bool
    market_id: Optional[int] = None
    message: str = ""


class MarketFormService:
    """State and rules of one create/edit market form session.

    Args:
        market_repo: MarketRepository
        subgroup_repo: SubgroupRepository
        region_repo: RegionRepository
        confirm: Confirmation collaborator passed on to the row set
        notify: Passive notification channel (load failures)
    """

    def __init__(
        self,
        market_repo,
        subgroup_repo,
        region_repo,
        confirm: Optional[Callable[[str], bool]] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self._market_repo = market_repo
        self._subgroup_repo = subgroup_repo
        self._region_repo = region_repo
        self._notify = notify
        self.rows = SubgroupRowSet(
            confirm=confirm,
            on_change=self._on_subgroups_changed,
            notify=notify,
        )

        self.market_id: Optional[int] = None
        self.is_edit_mode = False
        self.name = ""
        self.code = ""
        self.long_code = ""
        self.region = ""
        self.sub_region = ""
        self._original_name = ""
        self._original_code = ""

        self.code_exists = False
        self.name_exists = False
        self.regions: list[Region] = []
        self.subregions: list[Region] = []

        self.show_subgroups = False
        self.sub_groups: tuple = ()
        self.subgroup_rows_invalid = False
        self.loaded = False

    # =====================================================================
    # Session start
    # =====================================================================

    @property
    def title(self) -> str:
        return TITLE_EDIT if self.is_edit_mode else TITLE_CREATE

    @property
    def submit_label(self) -> str:
        return "Update Market" if self.is_edit_mode else "Create Market"

    def start_create(self) -> None:
        """Prepare an empty form with one blank subgroup row (section hidden)."""
        self.regions = self._region_repo.get_all_regions()
        self._load_cross_check_source()
        self.rows.initialize(self.code)
        self.loaded = True

    def start_edit(self, market_id: int) -> bool:
        """Load a market, its regions and subgroup rows into the form.

        Returns:
            False if the market could not be fetched.
        """
        self.is_edit_mode = True
        self.market_id = market_id
        self.regions = self._region_repo.get_all_regions()

        try:
            market = self._market_repo.get_market(market_id, use_cache=False)
        except ApiError as e:
            logger.error(f"Error fetching market {market_id}: {e}")
            if self._notify is not None:
                self._notify(LOAD_FAILED)
            return False

        self.name = market.name
        self.code = normalize_market_code(market.code)
        self.long_code = market.long_code
        self.region = market.region
        self.sub_region = market.sub_region
        self._original_name = self.name
        self._original_code = self.code
        if self.region:
            self.subregions = self._region_repo.get_subregions(self._region_key())

        self._load_cross_check_source()
        self.rows.load(
            self.code,
            market_id,
            lambda mid: self._subgroup_repo.get_subgroups(mid, self.code),
        )
        self.show_subgroups = any(r.is_persisted for _, r in self.rows.active_rows)
        self.loaded = True
        return True

    def _load_cross_check_source(self) -> None:
        try:
            existing = self._subgroup_repo.list_all()
        except ApiError as e:
            # The backend still rejects duplicates on submit
            logger.error(f"Could not load persisted subgroups for duplicate checks: {e}")
            existing = []
        self.rows.set_existing_subgroups(existing)

    # =====================================================================
    # Field updates
    # =====================================================================

    def set_market_code(self, code: Optional[str]) -> None:
        """Normalize the code, refresh the long code, sync subgroup rows and
        check uniqueness once the user changed it."""
        self.code = normalize_market_code(code)
        self._update_long_code()
        self.rows.set_market_code(self.code)
        self.code_exists = self._check_exists(
            self._market_repo.code_exists, self.code, self._original_code
        )

    def set_name(self, name: Optional[str]) -> None:
        self.name = name or ""
        self.name_exists = self._check_exists(
            self._market_repo.name_exists, self.name.strip(), self._original_name
        )

    def set_region(self, region_key) -> None:
        """Select a region, recompute the long code and load its sub-regions."""
        self.region = str(region_key) if region_key is not None else ""
        self._update_long_code()
        self.sub_region = ""
        self.subregions = self._region_repo.get_subregions(self._region_key()) if self.region else []

    def set_sub_region(self, sub_region_key) -> None:
        self.sub_region = str(sub_region_key) if sub_region_key is not None else ""

    def show_subgroup_section(self) -> None:
        """Reveal the subgroup section, adding a blank row if none is left."""
        self.show_subgroups = True
        if self.rows.last_change is None or self.rows.last_change.has_no_rows:
            self.rows.add_row()

    def _check_exists(self, check: Callable[[str], bool], value: str, original: str) -> bool:
        if not value or value.upper() == (original or "").upper():
            return False
        try:
            return bool(check(value))
        except ApiError as e:
            logger.error(f"Uniqueness check failed for '{value}': {e}")
            return False

    def _region_key(self) -> int:
        return int(self.region)

    def region_name(self) -> Optional[str]:
        """Display name of the selected region (API list first, then built-in)."""
        if not self.region:
            return None
        for region in self.regions:
            if str(region.key) == str(self.region):
                return region.value
        try:
            return RegionCode.from_key(self.region).display_name
        except ValueError:
            return None

    def _update_long_code(self) -> None:
        self.long_code = build_long_code(self.region_name(), self.code)

    def _on_subgroups_changed(self, change: RowSetChange) -> None:
        self.sub_groups = change.sub_groups
        self.subgroup_rows_invalid = change.has_invalid_row
        if change.has_no_rows:
            self.show_subgroups = False

    # =====================================================================
    # Validation & submission
    # =====================================================================

    def violations(self) -> set[MarketViolation]:
        found = validate_market_fields(self.name, self.code, self.long_code, self.region)
        if self.code_exists:
            found.add(MarketViolation.CODE_EXISTS)
        if self.name_exists:
            found.add(MarketViolation.NAME_EXISTS)
        if self.show_subgroups and self.subgroup_rows_invalid:
            found.add(MarketViolation.SUBGROUP_ERRORS)
        return found

    @property
    def is_valid(self) -> bool:
        return not self.violations()

    def build_payload(self) -> Market:
        """Market to send to the backend; subgroups in numeric-first order."""
        subgroups = ()
        if self.show_subgroups:
            subgroups = tuple(
                replace(
                    row,
                    market_identifier=row.market_identifier or self.market_id,
                    market_code=row.market_code or self.code,
                )
                for row in sorted(self.rows.valid_rows(), key=lambda r: subgroup_sort_key(r.subgroup_code))
            )
        return Market(
            identifier=self.market_id,
            name=self.name.strip(),
            code=self.code,
            long_code=self.long_code,
            region=self.region,
            sub_region=self.sub_region,
            subgroups=subgroups,
        )

    def submit(self) -> SubmitResult:
        """Create or update the market.

        In edit mode, soft-deleted persisted subgroups are deleted in the
        backend after the market update. Deleted rows are purged from the
        row set only after the backend accepted everything. Market caches are
        cleared after any successful write, even if a later call fails.
        """
        if self.violations():
            return SubmitResult(ok=False, market_id=self.market_id, message=FORM_INVALID)

        self.rows.sort_for_submit()
        market = self.build_payload()

        wrote = False
        try:
            if self.is_edit_mode:
                self._market_repo.update_market(self.market_id, market)
                wrote = True
                self._delete_removed_subgroups()
                message = MARKET_UPDATED
            else:
                self.market_id = self._market_repo.create_market(market)
                wrote = True
                message = MARKET_CREATED
        except ApiError as e:
            logger.error(f"Market submit failed ({'update' if self.is_edit_mode else 'create'}): {e}")
            return SubmitResult(
                ok=False,
                market_id=self.market_id,
                message=UPDATE_FAILED if self.is_edit_mode else CREATE_FAILED,
            )
        finally:
            if wrote:
                invalidate_market_caches()

        self.rows.purge_deleted()
        self._original_name = self.name
        self._original_code = self.code
        logger.info(f"{message}: {market.code} ({self.market_id})")
        return SubmitResult(ok=True, market_id=self.market_id, message=message)

    def _delete_removed_subgroups(self) -> None:
        for row in self.rows.deleted_persisted_rows():
            try:
                self._subgroup_repo.delete_subgroup(row.identifier)
            except ApiError as e:
                if not e.is_not_found:
                    raise
                logger.debug(f"Subgroup {row.identifier} already removed by the market update")

    def cancel(self) -> bool:
        """After confirmation, clear subgroup entries and restore loaded values."""
        if not self.rows.clear_entries():
            return False
        self.name = self._original_name
        self.code_exists = False
        self.name_exists = False
        if self.code != self._original_code:
            self.code = self._original_code
            self._update_long_code()
            self.rows.set_market_code(self.code)
        return True

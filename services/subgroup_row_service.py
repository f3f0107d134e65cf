"""
Subgroup Row Service

The row-set validator behind the subgroup section of the market form.
Owns the ordered list of SubgroupRow for one form session, enforces the
per-row field rules and the cross-row uniqueness rules, keeps each row's
market code in sync with the parent form, and reports the valid rows and an
aggregate validity flag to the parent after every mutation.

Design:
- Collaborators are plain callables passed in (confirm, on_change,
  on_invalid, notify), so the class has no Streamlit dependency
- Rows are soft-deleted (marked_deleted) and keep their slot
- Validation is synchronous, never raises, and runs after every mutation
- No Streamlit imports (service layer rule)
"""

from collections import Counter
from dataclasses import dataclass, replace
from itertools import count
from typing import Callable, Iterable, Optional

from domain.enums import SubgroupField, SubgroupViolation
from domain.market_rules import SUBGROUP_CODE_PATTERN, normalize_market_code, subgroup_sort_key
from domain.models import MarketID, PersistedSubgroup, SubgroupRow
from logging_config import setup_logging

logger = setup_logging(__name__, log_file="subgroup_rows.log")

DELETE_CONFIRM_MESSAGE = "Are you sure you want to delete this subgroup?"
CLEAR_CONFIRM_MESSAGE = "You have unsaved changes. Are you sure you want to proceed?"
LOAD_FAILED_MESSAGE = "Could not load the subgroups for this market."

Violations = frozenset[SubgroupViolation]


@dataclass(frozen=True)
class RowSetChange:
    """What the parent form receives after every mutation.

    Attributes:
        rows: Copies of all rows, soft-deleted ones included
        sub_groups: Copies of the valid, non-deleted rows (submission list)
        has_invalid_row: True if any non-deleted row has a violation
        has_no_rows: True if no non-deleted rows remain
    """
    rows: tuple[SubgroupRow, ...]
    sub_groups: tuple[SubgroupRow, ...]
    has_invalid_row: bool
    has_no_rows: bool


def _accept(message: str) -> bool:
    return True


class SubgroupRowSet:
    """Stateful, rule-driven collection of subgroup rows for one market form.

    Args:
        confirm: Called with a message before destructive actions; the action
            only happens when it returns True. Defaults to always accepting.
        on_change: Receives a RowSetChange after every mutation.
        on_invalid: Receives the aggregate invalid flag (also on can_add_new_row()).
        existing_subgroups: Persisted subgroups used for duplicate checks
            against rows outside this session.
        notify: Passive notification channel for load failures.
    """

    def __init__(
        self,
        confirm: Optional[Callable[[str], bool]] = None,
        on_change: Optional[Callable[[RowSetChange], None]] = None,
        on_invalid: Optional[Callable[[bool], None]] = None,
        existing_subgroups: Iterable[PersistedSubgroup] = (),
        notify: Optional[Callable[[str], None]] = None,
    ):
        self._confirm = confirm or _accept
        self._on_change = on_change
        self._on_invalid = on_invalid
        self._notify = notify
        self._existing: tuple[PersistedSubgroup, ...] = tuple(existing_subgroups)
        self._market_code = ""
        self._rows: list[SubgroupRow] = []
        self._violations: list[Violations] = []
        self._keys = count(1)
        self._last_change: Optional[RowSetChange] = None

    # =====================================================================
    # Accessors
    # =====================================================================

    @property
    def market_code(self) -> str:
        return self._market_code

    @property
    def rows(self) -> tuple[SubgroupRow, ...]:
        """All rows in order, soft-deleted ones included."""
        return tuple(self._rows)

    @property
    def active_rows(self) -> list[tuple[int, SubgroupRow]]:
        """(index, row) pairs for rows that are not soft-deleted."""
        return [(i, r) for i, r in enumerate(self._rows) if not r.marked_deleted]

    @property
    def last_change(self) -> Optional[RowSetChange]:
        return self._last_change

    def __len__(self) -> int:
        return len(self._rows)

    def violations(self, index: int) -> Violations:
        """Violations found for a row by the last validation pass."""
        if 0 <= index < len(self._violations):
            return self._violations[index]
        return frozenset()

    def valid_rows(self) -> list[SubgroupRow]:
        """Non-deleted rows with no violations, in current order."""
        return [
            row for row, found in zip(self._rows, self.validate())
            if not row.marked_deleted and not found
        ]

    def has_invalid_row(self) -> bool:
        return any(
            found for row, found in zip(self._rows, self.validate())
            if not row.marked_deleted
        )

    def deleted_persisted_rows(self) -> list[SubgroupRow]:
        """Soft-deleted rows that exist in the backend and must be deleted there."""
        return [r for r in self._rows if r.marked_deleted and r.is_persisted]

    def edited_rows(self) -> list[SubgroupRow]:
        return [r for r in self._rows if not r.marked_deleted and r.is_persisted and r.marked_edited]

    def new_rows(self) -> list[SubgroupRow]:
        return [r for r in self._rows if not r.marked_deleted and not r.is_persisted]

    # =====================================================================
    # Lifecycle
    # =====================================================================

    def initialize(self, market_code: str, existing_rows: Optional[Iterable[SubgroupRow]] = None) -> None:
        """Populate the set from existing_rows, or with one empty row.

        The set always holds at least one row afterwards.
        """
        self._market_code = normalize_market_code(market_code)
        self._rows = []
        for row in existing_rows or ():
            self._rows.append(replace(
                row,
                market_code=self._market_code or normalize_market_code(row.market_code),
                subgroup_code=(row.subgroup_code or "").upper(),
                subgroup_name=(row.subgroup_name or "").upper(),
                key=self._next_key(),
            ))
        if not self._rows:
            self._rows.append(self._empty_row())
        logger.debug(f"Row set initialized for market '{self._market_code}' with {len(self._rows)} rows")
        self.emit_change()

    def load(
        self,
        market_code: str,
        market_identifier: Optional[MarketID],
        fetch: Callable[[MarketID], Iterable[SubgroupRow]],
    ) -> None:
        """Initialize from the backend rows of a market.

        A fetch failure is logged and passed to notify; the set then falls
        back to one empty row so the form remains usable.
        """
        if market_identifier is None:
            self.initialize(market_code)
            return
        try:
            rows = list(fetch(market_identifier))
        except Exception as e:
            logger.error(f"Error fetching subgroups for market {market_code} ({market_identifier}): {e}")
            if self._notify is not None:
                self._notify(LOAD_FAILED_MESSAGE)
            rows = []
        self.initialize(market_code, rows)

    def set_existing_subgroups(self, items: Iterable[PersistedSubgroup]) -> None:
        """Replace the persisted cross-check source and re-validate."""
        self._existing = tuple(items)
        self.emit_change()

    # =====================================================================
    # Mutations
    # =====================================================================

    def add_row(self) -> SubgroupRow:
        """Append an empty row carrying the current market code."""
        row = self._empty_row()
        self._rows.append(row)
        self.emit_change()
        return row

    def delete_row(self, index: int) -> bool:
        """Soft-delete the row at index after confirmation.

        Returns:
            True if the row was marked deleted. Out-of-range indexes,
            already-deleted rows and rejected confirmations return False.
        """
        if not 0 <= index < len(self._rows) or self._rows[index].marked_deleted:
            return False
        if not self._confirm(DELETE_CONFIRM_MESSAGE):
            return False
        self._rows[index].marked_deleted = True
        logger.debug(f"Row {index} ({self._rows[index].key}) marked deleted")
        self.emit_change()
        return True

    def update_field(self, index: int, field, value: Optional[str]) -> None:
        """Store an uppercased code or trimmed name on a row and re-validate.

        Persisted rows are flagged as edited.

        Raises:
            ValueError: If field is not subgroupCode or subgroupName.
        """
        target = SubgroupField.parse(field)
        if not 0 <= index < len(self._rows) or self._rows[index].marked_deleted:
            return
        row = self._rows[index]
        value = (value or "").upper()
        if target is SubgroupField.SUBGROUP_CODE:
            row.subgroup_code = value
        else:
            row.subgroup_name = value.strip()
        if row.is_persisted:
            row.marked_edited = True
        self.emit_change()

    def set_market_code(self, code: Optional[str]) -> None:
        """Propagate a new parent market code to every non-deleted row.

        Not a user edit: marked_edited is left untouched.
        """
        self._market_code = normalize_market_code(code)
        for row in self._rows:
            if not row.marked_deleted:
                row.market_code = self._market_code
        self.emit_change()

    on_market_code_changed = set_market_code

    def sort_for_submit(self) -> None:
        """Reorder rows numeric codes first, then letters; deleted rows go last."""
        live = sorted(
            (r for r in self._rows if not r.marked_deleted),
            key=lambda r: subgroup_sort_key(r.subgroup_code),
        )
        deleted = [r for r in self._rows if r.marked_deleted]
        self._rows = live + deleted
        self.emit_change()

    def purge_deleted(self) -> int:
        """Drop soft-deleted rows once the backend confirmed the submission.

        Keeps at least one row. Returns the number of rows removed.
        """
        before = len(self._rows)
        self._rows = [r for r in self._rows if not r.marked_deleted]
        removed = before - len(self._rows)
        if not self._rows:
            self._rows.append(self._empty_row())
        self.emit_change()
        return removed

    def clear_entries(self) -> bool:
        """After confirmation, blank code and name on every non-deleted row."""
        if not self._confirm(CLEAR_CONFIRM_MESSAGE):
            return False
        for row in self._rows:
            if row.marked_deleted:
                continue
            row.subgroup_code = ""
            row.subgroup_name = ""
            if row.is_persisted:
                row.marked_edited = True
        self.emit_change()
        return True

    # =====================================================================
    # Validation & notification
    # =====================================================================

    def validate(self) -> list[Violations]:
        """Compute the violations of every row, aligned with ``rows``.

        Pure and idempotent. Soft-deleted rows get no violations and take no
        part in duplicate checks.
        """
        live = [r for r in self._rows if not r.marked_deleted]
        session_ids = {r.identifier for r in self._rows if r.identifier is not None}
        external = [
            p for p in self._existing
            if p.identifier is None or p.identifier not in session_ids
        ]

        code_counts = Counter((r.market_code, r.subgroup_code) for r in live if r.subgroup_code)
        name_counts = Counter((r.market_code, r.subgroup_name.strip()) for r in live if r.subgroup_name.strip())
        external_codes = {(p.market_code, p.subgroup_code) for p in external}
        external_names = {(p.market_code, p.subgroup_name.strip()) for p in external}

        result: list[Violations] = []
        for row in self._rows:
            if row.marked_deleted:
                result.append(frozenset())
                continue

            found: set[SubgroupViolation] = set()
            if not row.subgroup_code:
                found.add(SubgroupViolation.REQUIRED_CODE)
            elif not SUBGROUP_CODE_PATTERN.fullmatch(row.subgroup_code):
                found.add(SubgroupViolation.INVALID_CODE_FORMAT)
            if not row.subgroup_name.strip():
                found.add(SubgroupViolation.REQUIRED_NAME)

            code_key = (row.market_code, row.subgroup_code)
            if row.subgroup_code and (code_counts[code_key] > 1 or code_key in external_codes):
                found.add(SubgroupViolation.DUPLICATE_CODE)

            name_key = (row.market_code, row.subgroup_name.strip())
            if row.subgroup_name.strip() and (name_counts[name_key] > 1 or name_key in external_names):
                found.add(SubgroupViolation.DUPLICATE_NAME)

            result.append(frozenset(found))
        return result

    def emit_change(self) -> None:
        """Re-validate and hand the current state to the parent."""
        self._violations = self.validate()
        live = [
            (row, found) for row, found in zip(self._rows, self._violations)
            if not row.marked_deleted
        ]
        has_invalid = any(found for _, found in live)
        change = RowSetChange(
            rows=tuple(replace(r) for r in self._rows),
            sub_groups=tuple(replace(r) for r, found in live if not found),
            has_invalid_row=has_invalid,
            has_no_rows=not live,
        )
        self._last_change = change
        if self._on_invalid is not None:
            self._on_invalid(has_invalid)
        if self._on_change is not None:
            self._on_change(change)

    def can_add_new_row(self) -> bool:
        """False while any non-deleted row has a violation."""
        has_invalid = self.has_invalid_row()
        if self._on_invalid is not None:
            self._on_invalid(has_invalid)
        return not has_invalid

    # =====================================================================
    # Internals
    # =====================================================================

    def _next_key(self) -> str:
        return f"row-{next(self._keys)}"

    def _empty_row(self) -> SubgroupRow:
        return SubgroupRow(market_code=self._market_code, key=self._next_key())

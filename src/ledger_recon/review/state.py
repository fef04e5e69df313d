"""
Review overlay state for a reconciliation result.

Status tags and selections are kept in maps keyed by the item's position in
its unmatched collection. The result itself is never modified.
"""

from typing import Iterable
import logging

from ..models.transaction import (
    ReconciliationResult,
    ReviewCollection,
    ReviewSnapshot,
    ReviewStatus,
)
from .filters import (
    ALL_STATUSES,
    StatusFilter,
    pair_matches_search,
    status_matches,
    transaction_matches_search,
)

logger = logging.getLogger(__name__)


class ReviewState:
    """
    In-memory review annotations for one result.

    Tracks, independently for the unmatched bank and unmatched ledger
    collections, a status map (absent entries are untagged) and a selection
    set used for bulk actions. Unknown indices are ignored.
    """

    def __init__(self, result: ReconciliationResult):
        self.result = result
        self._statuses: dict[ReviewCollection, dict[int, ReviewStatus]] = {
            collection: {} for collection in ReviewCollection
        }
        self._selections: dict[ReviewCollection, set[int]] = {
            collection: set() for collection in ReviewCollection
        }

    # -- queries ---------------------------------------------------------

    def statuses(self, collection: ReviewCollection) -> dict[int, ReviewStatus]:
        """Copy of the status map for a collection."""
        return dict(self._statuses[collection])

    def status_of(self, collection: ReviewCollection, index: int) -> ReviewStatus:
        """Effective status of an item; untagged items are DEFAULT."""
        return self._statuses[collection].get(index, ReviewStatus.DEFAULT)

    def selection(self, collection: ReviewCollection) -> frozenset[int]:
        """Currently selected indices of a collection."""
        return frozenset(self._selections[collection])

    @property
    def has_selection(self) -> bool:
        return any(self._selections.values())

    def visible_indices(
        self,
        collection: ReviewCollection,
        search_term: str = "",
        status_filter: StatusFilter = ALL_STATUSES,
    ) -> list[int]:
        """
        Indices of unmatched items that pass the active filters, in order.

        Args:
            collection: Which unmatched collection to filter
            search_term: Free-text term (empty matches everything)
            status_filter: "all" or a ReviewStatus (or its value)

        Returns:
            Positional indices into the full collection
        """
        return [
            index
            for index, transaction in enumerate(self.result.unmatched(collection))
            if transaction_matches_search(transaction, search_term)
            and status_matches(self.status_of(collection, index), status_filter)
        ]

    def visible_matches(self, search_term: str = "") -> list[int]:
        """Indices of matched pairs that pass the free-text filter."""
        return [
            index
            for index, pair in enumerate(self.result.matched_transactions)
            if pair_matches_search(pair, search_term)
        ]

    def snapshot(self) -> ReviewSnapshot:
        """Take a consistent copy of selections and statuses for export."""
        return ReviewSnapshot(
            bank_selection=self.selection(ReviewCollection.BANK),
            ledger_selection=self.selection(ReviewCollection.LEDGER),
            bank_statuses=self.statuses(ReviewCollection.BANK),
            ledger_statuses=self.statuses(ReviewCollection.LEDGER),
        )

    # -- mutations -------------------------------------------------------

    def toggle_selection(self, collection: ReviewCollection, index: int) -> None:
        """Add the index to the selection, or remove it if already selected."""
        if not self._in_range(collection, index):
            logger.debug(f"Ignoring selection of unknown {collection.value} index {index}")
            return

        selected = self._selections[collection]
        if index in selected:
            selected.discard(index)
        else:
            selected.add(index)

    def select_all_visible(
        self, collection: ReviewCollection, visible_indices: Iterable[int]
    ) -> None:
        """
        Select every visible item, or clear the selection on a repeat call.

        If the selection already equals the (non-empty) visible set it is
        cleared; otherwise it becomes exactly the visible set.
        """
        visible = {i for i in visible_indices if self._in_range(collection, i)}
        if visible and self._selections[collection] == visible:
            self._selections[collection] = set()
        else:
            self._selections[collection] = visible

    def apply_bulk_status(
        self,
        collection: ReviewCollection,
        indices: Iterable[int],
        status: ReviewStatus,
    ) -> None:
        """
        Tag several items at once and end the selection.

        DEFAULT removes the tag. The new status map is built completely
        before it replaces the old one.

        Args:
            collection: Which unmatched collection to update
            indices: Items to tag
            status: Status to apply
        """
        targets = set(indices)

        updated = dict(self._statuses[collection])
        for index in targets:
            if not self._in_range(collection, index):
                continue
            if status is ReviewStatus.DEFAULT:
                updated.pop(index, None)
            else:
                updated[index] = status

        self._statuses[collection] = updated
        self._selections[collection] = set()
        logger.debug(
            f"Applied {status.value} to {len(targets)} {collection.value} item(s)"
        )

    def apply_status_to_selection(self, collection: ReviewCollection, status: ReviewStatus) -> None:
        """Bulk-tag the currently selected items of a collection."""
        self.apply_bulk_status(collection, self.selection(collection), status)

    def set_status(self, collection: ReviewCollection, index: int, status: ReviewStatus) -> None:
        """Tag a single item without touching the selection."""
        if not self._in_range(collection, index):
            return
        if status is ReviewStatus.DEFAULT:
            self._statuses[collection].pop(index, None)
        else:
            self._statuses[collection][index] = status

    def clear_status(self, collection: ReviewCollection, index: int) -> None:
        """Remove an item's tag; a no-op for untagged items."""
        self._statuses[collection].pop(index, None)

    def _in_range(self, collection: ReviewCollection, index: int) -> bool:
        return 0 <= index < len(self.result.unmatched(collection))

"""Tests for the review overlay: selection, bulk status and filters."""

from decimal import Decimal

import pytest

from ledger_recon.models.transaction import (
    MatchedPair,
    ReviewCollection,
    ReviewStatus,
    Transaction,
)
from ledger_recon.review.filters import (
    ALL_STATUSES,
    pair_matches_search,
    status_matches,
    transaction_matches_search,
)
from ledger_recon.review.state import ReviewState

BANK = ReviewCollection.BANK
LEDGER = ReviewCollection.LEDGER


@pytest.fixture
def review(two_bank_items_result):
    return ReviewState(two_bank_items_result)


class TestSelection:
    """Tests for per-collection selection."""

    def test_toggle_adds_then_removes(self, review):
        review.toggle_selection(BANK, 1)
        assert review.selection(BANK) == {1}

        review.toggle_selection(BANK, 1)
        assert review.selection(BANK) == frozenset()

    def test_collections_are_independent(self, review):
        review.toggle_selection(BANK, 0)

        assert review.selection(LEDGER) == frozenset()
        assert review.has_selection

    def test_unknown_index_is_ignored(self, review):
        review.toggle_selection(BANK, 7)
        review.toggle_selection(LEDGER, -1)

        assert not review.has_selection

    def test_select_all_visible_twice_clears(self, review):
        """Selecting all visible items is a toggle when repeated."""
        # Arrange
        visible = review.visible_indices(BANK)

        # Act
        review.select_all_visible(BANK, visible)
        after_first = review.selection(BANK)
        review.select_all_visible(BANK, visible)

        # Assert
        assert after_first == {0, 1}
        assert review.selection(BANK) == frozenset()

    def test_select_all_visible_replaces_partial_selection(self, review):
        review.toggle_selection(BANK, 0)

        review.select_all_visible(BANK, [0, 1])

        assert review.selection(BANK) == {0, 1}

    def test_select_all_with_nothing_visible_gives_empty_selection(self, review):
        review.toggle_selection(BANK, 0)

        review.select_all_visible(BANK, [])

        assert review.selection(BANK) == frozenset()


class TestStatuses:
    """Tests for status tagging."""

    def test_bulk_cleared_then_default_round_trips_to_untagged(self, review):
        # Act
        review.apply_bulk_status(BANK, {0, 1}, ReviewStatus.CLEARED)
        tagged = review.statuses(BANK)
        review.apply_bulk_status(BANK, {0, 1}, ReviewStatus.DEFAULT)

        # Assert
        assert tagged == {0: ReviewStatus.CLEARED, 1: ReviewStatus.CLEARED}
        assert review.statuses(BANK) == {}
        assert review.status_of(BANK, 0) is ReviewStatus.DEFAULT

    def test_bulk_status_clears_selection(self, review):
        review.toggle_selection(BANK, 0)
        review.toggle_selection(BANK, 1)

        review.apply_status_to_selection(BANK, ReviewStatus.INVESTIGATING)

        assert review.selection(BANK) == frozenset()
        assert review.status_of(BANK, 1) is ReviewStatus.INVESTIGATING

    def test_bulk_status_skips_unknown_indices(self, review):
        review.apply_bulk_status(LEDGER, [0, 5], ReviewStatus.REVIEWED)

        assert review.statuses(LEDGER) == {0: ReviewStatus.REVIEWED}

    def test_set_status_keeps_selection(self, review):
        review.toggle_selection(BANK, 0)

        review.set_status(BANK, 0, ReviewStatus.REVIEWED)

        assert review.selection(BANK) == {0}
        assert review.status_of(BANK, 0) is ReviewStatus.REVIEWED

    def test_clear_status_on_untagged_item_is_noop(self, review):
        review.set_status(BANK, 1, ReviewStatus.CLEARED)

        review.clear_status(BANK, 0)
        review.clear_status(BANK, 1)

        assert review.statuses(BANK) == {}

    def test_statuses_returns_a_copy(self, review):
        review.statuses(BANK)[0] = ReviewStatus.CLEARED

        assert review.status_of(BANK, 0) is ReviewStatus.DEFAULT

    def test_snapshot_is_isolated_from_later_changes(self, review):
        # Arrange
        review.toggle_selection(BANK, 0)
        review.set_status(LEDGER, 0, ReviewStatus.INVESTIGATING)

        # Act
        snapshot = review.snapshot()
        review.toggle_selection(BANK, 0)
        review.clear_status(LEDGER, 0)

        # Assert
        assert snapshot.selection(BANK) == {0}
        assert snapshot.status_of(LEDGER, 0) is ReviewStatus.INVESTIGATING

    def test_snapshot_is_hashable_and_read_only(self, review):
        # Arrange
        review.toggle_selection(BANK, 1)
        review.set_status(BANK, 0, ReviewStatus.CLEARED)

        # Act
        first = review.snapshot()
        second = review.snapshot()

        # Assert
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1
        with pytest.raises(TypeError):
            first.bank_statuses[1] = ReviewStatus.REVIEWED
        assert first.status_of(BANK, 1) is ReviewStatus.DEFAULT

    def test_result_is_never_modified(self, review, two_bank_items_result):
        before = two_bank_items_result.to_dict()

        review.apply_bulk_status(BANK, {0}, ReviewStatus.CLEARED)

        assert review.result.to_dict() == before


class TestVisibility:
    """Tests for filtered views."""

    def test_search_and_status_filters_combine(self, review):
        review.set_status(BANK, 1, ReviewStatus.INVESTIGATING)

        assert review.visible_indices(BANK, "charge") == [1]
        assert review.visible_indices(BANK, "", ReviewStatus.INVESTIGATING) == [1]
        assert review.visible_indices(BANK, "", "default") == [0]
        assert review.visible_indices(BANK, "fee", ReviewStatus.INVESTIGATING) == []

    def test_indices_refer_to_full_collection(self, review):
        assert review.visible_indices(BANK, "2024-03-12") == [1]

    def test_visible_matches(self, review):
        assert review.visible_matches("acme") == [0]
        assert review.visible_matches("nothing like this") == []


class TestSearchPredicates:
    """Tests for the free-text and status predicates."""

    @pytest.fixture
    def supplies(self):
        return Transaction("2024-03-15", "Office Supplies Depot", Decimal("145.5"))

    @pytest.mark.parametrize("term", ["", "supplies", "OFFICE", "2024-03", "145.5", "145.50", "45"])
    def test_matching_terms(self, supplies, term):
        assert transaction_matches_search(supplies, term)

    @pytest.mark.parametrize("term", ["rent", "2023", "145.55"])
    def test_non_matching_terms(self, supplies, term):
        assert not transaction_matches_search(supplies, term)

    def test_pair_matches_either_leg(self, supplies):
        ledger = Transaction("2024-03-16", "Supplies - Office Depot", Decimal("145.5"))
        pair = MatchedPair(supplies, ledger)

        assert pair_matches_search(pair, "- office")
        assert pair_matches_search(pair, "2024-03-16")
        assert pair_matches_search(pair, "145.50")

    def test_status_filter(self):
        assert status_matches(ReviewStatus.CLEARED, ALL_STATUSES)
        assert status_matches(ReviewStatus.CLEARED, "cleared")
        assert not status_matches(ReviewStatus.DEFAULT, ReviewStatus.CLEARED)

"""Tests for the known-listing set."""

import itertools

from immo_watch.tracking import KnownListings


class TestKnownListings:
    def test_first_observation_is_new(self):
        known = KnownListings()
        assert known.observe("A") is True
        assert known.observe("A") is False
        assert known.observe("A") is False
        assert len(known) == 1
        assert "A" in known

    def test_each_id_new_exactly_once_in_any_order(self):
        """Test that interleaving never reports an ID as new twice."""
        for order in itertools.permutations(["A", "B", "A", "C", "B"]):
            known = KnownListings()
            new = [listing_id for listing_id in order if known.observe(listing_id)]
            assert sorted(new) == ["A", "B", "C"]
            assert len(known) == 3

    def test_seeded_ids_are_known(self):
        known = KnownListings(["A", "B"])
        assert known.observe("A") is False
        assert known.observe("C") is True
        assert len(known) == 3

    def test_unknown_id_not_contained(self):
        assert "X" not in KnownListings()

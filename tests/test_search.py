"""Tests for fuzzy item search ranking."""

from reunitems.ITEMS.models import DisplayItem
from reunitems.ITEMS.search import match_distance, search_items


def _records():
    return [
        {"id": "1", "name": "Red Water Bottle", "location": "Library"},
        {"id": "2", "name": "Blue Umbrella", "location": "Gym"},
        {"id": "3", "name": "Calculator", "location": "Science Hall"},
        {"id": "4", "name": "Black Backpack", "location": "Cafeteria"},
    ]


class TestEmptyQuery:
    def test_returns_same_list(self):
        records = _records()
        assert search_items(records, "") is records

    def test_empty_candidates(self):
        records = []
        assert search_items(records, "") is records
        assert search_items([], "bottle") == []

    def test_order_preserved(self):
        records = _records()
        assert [r["id"] for r in search_items(records, "")] == ["1", "2", "3", "4"]


class TestTypoTolerance:
    def test_misspelling_finds_bottle(self):
        results = search_items(_records(), "botle")
        assert results
        assert results[0]["name"] == "Red Water Bottle"

    def test_unrelated_query_finds_nothing(self):
        assert search_items(_records(), "xyz123") == []

    def test_short_query_sharing_two_letters_finds_nothing(self):
        records = [
            {"name": "Red Water Bottle", "location": "Gym"},
            {"name": "Green Umbrella", "location": "Library"},
        ]
        assert search_items(records, "cat") == []
        assert search_items(records, "pen") == []

    def test_case_insensitive(self):
        results = search_items(_records(), "UMBRELLA")
        assert results[0]["id"] == "2"

    def test_location_field_matches(self):
        results = search_items(_records(), "cafeteria")
        assert results[0]["id"] == "4"

    def test_exact_match_has_zero_distance(self):
        assert match_distance({"name": "Calculator", "location": ""}, "calculator") == 0.0

    def test_threshold_is_respected(self):
        records = _records()
        assert search_items(records, "botle", threshold=0.0) == []
        assert len(search_items(records, "botle", threshold=1.0)) == len(records)


class TestOrdering:
    def test_closest_first(self):
        records = [
            {"name": "Bottle Opener", "location": "Kitchen"},
            {"name": "Bottle", "location": "Gym"},
            {"name": "Botl", "location": "Gym"},
        ]
        results = search_items(records, "bottle")
        distances = [match_distance(r, "bottle") for r in results]
        assert distances == sorted(distances)

    def test_ties_keep_input_order(self):
        records = [
            {"id": "a", "name": "Keys", "location": "Gym"},
            {"id": "b", "name": "Keys", "location": "Library"},
            {"id": "c", "name": "Keys", "location": "Hall"},
        ]
        assert [r["id"] for r in search_items(records, "keys")] == ["a", "b", "c"]

    def test_duplicates_are_kept(self):
        record = {"name": "Laptop Charger", "location": "Library"}
        results = search_items([record, record], "charger")
        assert len(results) == 2


class TestQueryShapes:
    def test_whitespace_query_is_matched_not_identity(self):
        records = _records()
        results = search_items(records, " ")
        assert results is not records

    def test_works_on_display_items(self):
        items = [
            DisplayItem(id="1", organization_id="org", name="Red Water Bottle", location="Library"),
            DisplayItem(id="2", organization_id="org", name="Umbrella", location="Cafeteria"),
        ]
        results = search_items(items, "botle")
        assert [i.id for i in results] == ["1"]

    def test_missing_fields_do_not_crash(self):
        records = [{"name": None}, {}, {"name": "Scarf", "location": None}]
        assert search_items(records, "scarf") == [records[2]]

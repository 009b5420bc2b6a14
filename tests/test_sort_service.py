"""Tests for display sorting and rename ordering."""

from datetime import datetime

from core.models import Photo
from core.services.sort_service import SortService


def test_multi_key_sort_with_directions():
    photos = [
        Photo("b.jpg", "Beach", taken_date=datetime(2020, 1, 2)),
        Photo("a.jpg", "Sunset", taken_date=datetime(2020, 1, 2)),
        Photo("c.jpg", "Alps", taken_date=datetime(2019, 5, 5)),
    ]
    result = SortService().sort(photos, [("taken_date", False), ("path", True)])
    assert [p.path for p in result] == ["a.jpg", "b.jpg", "c.jpg"]


def test_missing_values_sort_first_ascending():
    photos = [Photo("x.jpg", "Later", datetime(2021, 1, 1)), Photo("y.jpg")]
    result = SortService().sort(photos, [("taken_date", True)])
    assert [p.path for p in result] == ["y.jpg", "x.jpg"]


def test_text_sort_is_case_insensitive():
    photos = [Photo("B.jpg"), Photo("a.jpg"), Photo("C.jpg")]
    result = SortService().sort(photos, [("path", True)])
    assert [p.path for p in result] == ["a.jpg", "B.jpg", "C.jpg"]


def test_no_keys_keeps_order():
    photos = [Photo("b.jpg"), Photo("a.jpg")]
    assert SortService().sort(photos, []) == photos


class TestOrderForRenaming:
    """Chronological ordering used for sort prefixes."""

    def test_taken_date_then_creation_time(self):
        creation = {"late.jpg": datetime(2023, 1, 1), "early.jpg": datetime(2000, 1, 1)}
        photos = [
            Photo("late.jpg", "L"),
            Photo("mid.jpg", "M", taken_date=datetime(2010, 1, 1)),
            Photo("early.jpg", "E"),
        ]
        ordered = SortService().order_for_renaming(photos, creation.get)
        assert [p.path for p in ordered] == ["early.jpg", "mid.jpg", "late.jpg"]

    def test_undated_photos_go_last_in_listing_order(self):
        photos = [
            Photo("u2.jpg", "U2"),
            Photo("d.jpg", "D", taken_date=datetime(2010, 1, 1)),
            Photo("u1.jpg", "U1"),
        ]
        ordered = SortService().order_for_renaming(photos, lambda _path: None)
        assert [p.path for p in ordered] == ["d.jpg", "u2.jpg", "u1.jpg"]

    def test_equal_dates_keep_listing_order(self):
        when = datetime(2015, 6, 1)
        photos = [Photo(f"{i}.jpg", "Same", taken_date=when) for i in range(5)]
        ordered = SortService().order_for_renaming(photos, lambda _path: None)
        assert ordered == photos

"""Tests for predicate helpers."""

from camscan.scanner.predicates import (
    all_of,
    any_of,
    files_only,
    known_images,
    match_extensions,
    name_contains,
    predicate_from_filters,
)

from conftest import file, folder


class TestPredicates:
    def test_files_only(self):
        assert files_only(file("S/a.jpg"))
        assert not files_only(folder("S/DCIM"))

    def test_match_extensions_normalizes(self):
        predicate = match_extensions(".JPG", "cr3")

        assert predicate(file("S/IMG_1.jpg"))
        assert predicate(file("S/IMG_1.CR3"))
        assert not predicate(file("S/IMG_1.mp4"))
        assert not predicate(folder("S/archive.jpg"))

    def test_known_images_accepts_unloaded_metadata(self):
        assert known_images(file("S/DSC_0001.NEF"))
        assert known_images(file("S/UNKNOWN.BIN", metadata_loaded=False))
        assert not known_images(file("S/MOV_0001.MOV"))
        assert not known_images(folder("S/DCIM"))

    def test_name_contains_is_case_insensitive(self):
        assert name_contains("img")(file("S/IMG_0001.JPG"))
        assert not name_contains("dsc")(file("S/IMG_0001.JPG"))

    def test_combinators(self):
        jpg = match_extensions("jpg")
        first = name_contains("0001")

        assert all_of(jpg, first)(file("S/IMG_0001.JPG"))
        assert not all_of(jpg, first)(file("S/IMG_0002.JPG"))
        assert any_of(jpg, first)(file("S/IMG_0001.MP4"))


class TestPredicateFromFilters:
    def test_no_filters_is_none(self):
        assert predicate_from_filters() is None

    def test_single_filter(self):
        predicate = predicate_from_filters(extensions=["mp4"])

        assert predicate(file("S/clip.mp4"))
        assert not predicate(file("S/img.jpg"))

    def test_filters_are_combined(self):
        predicate = predicate_from_filters(["jpg", "mp4"], images_only=True, name_text="img")

        assert predicate(file("S/IMG_1.JPG"))
        assert not predicate(file("S/IMG_1.MP4"))
        assert not predicate(file("S/DSC_1.JPG"))

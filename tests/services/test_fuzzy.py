from types import SimpleNamespace

from bookclub.services.fuzzy import (
    find_fuzzy_match,
    is_fuzzy_match,
    levenshtein_distance,
    normalize_label,
)


def test_normalize_label_lowercases_trims_and_collapses_whitespace():
    assert normalize_label("  Science \t  Fiction\n") == "science fiction"


def test_levenshtein_distance():
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("same", "same") == 0


def test_plural_matches_through_substring_rule():
    assert is_fuzzy_match("Mystery", "Mysteries")


def test_case_and_spacing_differences_match():
    assert is_fuzzy_match("Science  Fiction", "science fiction ")


def test_small_typo_matches():
    assert is_fuzzy_match("Romance", "Romanse")


def test_unrelated_themes_do_not_match():
    assert not is_fuzzy_match("Science Fiction", "Fantasy")


def test_long_substring_difference_does_not_match():
    # "war" is inside "world war classics" but far too short to be a variant
    assert not is_fuzzy_match("War", "World War Classics")


def test_find_fuzzy_match_returns_first_in_supplied_order():
    existing = ["Horror", "Mysteries", "Mystery"]

    assert find_fuzzy_match("Mystery", existing) == "Mysteries"
    assert find_fuzzy_match("Biography", existing) is None


def test_find_fuzzy_match_accepts_named_objects():
    themes = [SimpleNamespace(id=1, name="Poetry"), SimpleNamespace(id=2, name="Memoirs")]

    match = find_fuzzy_match("memoir", themes)

    assert match is themes[1]

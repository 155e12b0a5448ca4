import pytest

from pokefetch.validation import dedupe, is_valid_identifier, read_items_file


@pytest.mark.parametrize("item", ["bulbasaur", "mr-mime", "ho-oh", "abc", "---"])
def test_valid_identifiers(item):
    assert is_valid_identifier(item)


@pytest.mark.parametrize(
    "item", ["xx", "", "Pikachu", "porygon2", "mr mime", "nidoran_f", "a/b", " ivysaur", None, 25]
)
def test_invalid_identifiers(item):
    assert not is_valid_identifier(item)


def test_dedupe_keeps_first_occurrence():
    assert dedupe(["ivysaur", "bulbasaur", "ivysaur", "xx", "bulbasaur"]) == [
        "ivysaur",
        "bulbasaur",
        "xx",
    ]


def test_read_items_file_skips_blanks_and_comments(tmp_path):
    path = tmp_path / "items.txt"
    path.write_text(
        "# starters\nbulbasaur\n\n  charmander  \nsquirtle # water\n#pikachu\n",
        encoding="utf-8",
    )

    assert read_items_file(path) == ["bulbasaur", "charmander", "squirtle"]

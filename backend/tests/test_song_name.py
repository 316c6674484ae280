import pytest

from songlist.utils.song_name import standardize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("晴天 (Live)", "晴天"),
        ("稻香（伴奏）", "稻香"),
        ("Clocks [Remastered 2008]", "Clocks"),
        ("七里香 【官方版】", "七里香"),
        ("Fix  You ", "Fix You"),
        ("Song (feat. A) (Remix)", "Song"),
        ("Plain", "Plain"),
    ],
)
def test_standardize(raw, expected):
    assert standardize(raw) == expected


def test_standardize_never_returns_empty_for_bracket_only_names():
    assert standardize(" (Intro) ") == "(Intro)"

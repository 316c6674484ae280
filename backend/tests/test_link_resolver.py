import pytest

from conftest import FakeTransport
from songlist.services.errors import (
    InvalidLink,
    RedirectLoop,
    RedirectResolutionFailed,
    UnsupportedLinkFormat,
)
from songlist.services.link_resolver import (
    LinkResolver,
    LinkShape,
    classify_link,
    number_after_keyword,
)


@pytest.mark.parametrize(
    "link, shape",
    [
        ("https://y.qq.com/n/ryqq/playlist/123456", LinkShape.PLAYLIST_PATH),
        ("https://i.y.qq.com/n2/m/share/details/taoge.html?platform=11&id=98765&foo=1", LinkShape.ID_QUERY_PARAM),
        ("https://c6.y.qq.com/base/fcgi-bin/u?__=abcDEF", LinkShape.SHORT_REDIRECT),
        ("https://i.y.qq.com/n2/m/share/details/taoge.html?hosteuin=xyz", LinkShape.DETAILS_PAGE),
        ("https://music.163.com/#/playlist?id=", LinkShape.UNRECOGNIZED),
    ],
)
def test_classify_link(link, shape):
    assert classify_link(link) == shape


def test_playlist_path_wins_over_id_param():
    link = "https://y.qq.com/n/ryqq/playlist?id=1/playlist/42"
    assert classify_link(link) == LinkShape.PLAYLIST_PATH
    assert LinkResolver(FakeTransport()).resolve(link) == 42


def test_resolve_playlist_path():
    resolver = LinkResolver(FakeTransport())
    assert resolver.resolve("https://y.qq.com/n/ryqq/playlist/123456") == 123456


def test_resolve_id_param_stops_at_first_non_digit():
    resolver = LinkResolver(FakeTransport())
    assert resolver.resolve("https://y.qq.com/n/yqq/playlist.html?id=98765&foo=1") == 98765


def test_resolve_strips_surrounding_whitespace():
    resolver = LinkResolver(FakeTransport())
    assert resolver.resolve("  https://y.qq.com/n/ryqq/playlist/77\n") == 77


@pytest.mark.parametrize(
    "link",
    [
        "https://y.qq.com/n/ryqq/playlist/0",
        "https://y.qq.com/n/yqq/playlist.html?id=0&foo=1",
        "https://y.qq.com/n/yqq/playlist.html?id=000",
    ],
)
def test_zero_id_is_invalid(link):
    with pytest.raises(InvalidLink):
        LinkResolver(FakeTransport()).resolve(link)


def test_unrecognized_link_raises_unsupported_format():
    with pytest.raises(UnsupportedLinkFormat):
        LinkResolver(FakeTransport()).resolve("https://example.com/album/1")


def test_id_keyword_without_digits_is_invalid():
    # "xid=" matches first and is followed by letters
    with pytest.raises(InvalidLink):
        LinkResolver(FakeTransport()).resolve("https://y.qq.com/x?xid=abc&id=5")


def test_overflowing_id_is_invalid():
    with pytest.raises(InvalidLink):
        number_after_keyword("playlist/99999999999999999999", "playlist/")


def test_short_link_is_followed_once():
    short = "https://c6.y.qq.com/base/fcgi-bin/u?__=abc"
    transport = FakeTransport(redirects={short: "https://y.qq.com/n/ryqq/playlist/7364061065"})

    assert LinkResolver(transport).resolve(short) == 7364061065
    assert transport.redirect_calls == [short]


def test_short_link_chain_is_followed_up_to_depth():
    first = "https://c6.y.qq.com/base/fcgi-bin/u?__=one"
    second = "https://c6.y.qq.com/base/fcgi-bin/u?__=two"
    transport = FakeTransport(
        redirects={first: second, second: "https://i.y.qq.com/n2/m/share/details/taoge.html?id=55"}
    )

    assert LinkResolver(transport, max_redirect_depth=3).resolve(first) == 55
    assert transport.redirect_calls == [first, second]


def test_short_link_loop_is_capped():
    loop = "https://c6.y.qq.com/base/fcgi-bin/u?__=loop"
    transport = FakeTransport(redirects={loop: loop})

    with pytest.raises(RedirectLoop):
        LinkResolver(transport, max_redirect_depth=3).resolve(loop)
    assert len(transport.redirect_calls) == 3


def test_short_link_resolution_failure_propagates():
    with pytest.raises(RedirectResolutionFailed):
        LinkResolver(FakeTransport()).resolve("https://c6.y.qq.com/base/fcgi-bin/u?__=gone")


def test_details_page_reads_configured_param():
    resolver = LinkResolver(FakeTransport(), details_param="disstid_key")
    link = "https://i.y.qq.com/n2/m/share/details/taoge.html?disstid_key=8080&hosteuin=abc"
    assert resolver.resolve(link) == 8080


def test_details_page_reads_param_from_fragment():
    resolver = LinkResolver(FakeTransport(), details_param="tk")
    link = "https://i.y.qq.com/n2/m/share/details/taoge.html#/?tk=321"
    assert resolver.resolve(link) == 321


def test_details_page_without_param_is_invalid():
    with pytest.raises(InvalidLink):
        LinkResolver(FakeTransport()).resolve("https://i.y.qq.com/n2/m/share/details/taoge.html?hosteuin=abc")


def test_details_page_with_non_numeric_param_is_invalid():
    resolver = LinkResolver(FakeTransport(), details_param="tk")
    with pytest.raises(InvalidLink):
        resolver.resolve("https://i.y.qq.com/n2/m/share/details/taoge.html?tk=12ab")

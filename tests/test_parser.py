from urllib.parse import quote

import pytest
from bs4 import BeautifulSoup

from doccrawler.errors import FragmentDecodeError
from doccrawler.parser import (
    DecodedFragmentSource,
    SelectorSource,
    decode_fragment,
    discover_links,
    extract_links,
    select_links,
)

BASE = "https://docs.aws.amazon.com/"


def test_anchors_filtered_to_scope():
    html = """
    <html><body>
        <a href="/guide">Guide</a>
        <a href="https://other.example.com/x">Other</a>
        <a href="https://docs.aws.amazon.com/s3/?lang=ja#top">S3</a>
    </body></html>
    """
    assert discover_links(html, BASE) == [
        "https://docs.aws.amazon.com/guide",
        "https://docs.aws.amazon.com/s3/",
    ]


def test_missing_or_empty_href_gives_no_link():
    html = '<a name="x">no href</a><a href="">empty</a><a href="/ok">ok</a>'
    assert discover_links(html, BASE) == ["https://docs.aws.amazon.com/ok"]


def test_duplicates_are_kept():
    html = '<a href="/guide">1</a><a href="/guide#part">2</a>'
    assert discover_links(html, BASE) == ["https://docs.aws.amazon.com/guide"] * 2


def test_encoded_input_value_yields_links():
    html = '<input type="hidden" value="%3Ca%20href%3D%22%2Fapi%22%3E">'
    assert discover_links(html, BASE) == ["https://docs.aws.amazon.com/api"]


def test_list_card_items_inside_input():
    fragment = (
        '<list-card-item href="/lambda/">Lambda</list-card-item>'
        '<list-card-item href="https://aws.amazon.com/ec2/">EC2</list-card-item>'
    )
    html = f'<input value="{quote(fragment)}">'
    assert discover_links(html, BASE) == ["https://docs.aws.amazon.com/lambda/"]


def test_anchor_links_come_before_fragment_links():
    html = (
        '<input value="%3Ca%20href%3D%22%2Ffirst%22%3E">'
        '<a href="/second">second</a>'
    )
    assert discover_links(html, BASE) == [
        "https://docs.aws.amazon.com/second",
        "https://docs.aws.amazon.com/first",
    ]


def test_input_without_value_is_ignored():
    assert discover_links('<input type="text"><input value="">', BASE) == []


def test_malformed_fragment_skipped_by_default():
    html = '<input value="%FF%FE"><input value="%3Ca%20href%3D%22%2Fok%22%3E">'
    assert discover_links(html, BASE) == ["https://docs.aws.amazon.com/ok"]


def test_malformed_fragment_strict_raises():
    with pytest.raises(FragmentDecodeError):
        discover_links('<input value="%FF%FE">', BASE, strict_fragments=True)


def test_decode_fragment_leaves_stray_percent():
    assert decode_fragment("100%25 %zz") == "100% %zz"


def test_select_links_custom_attribute():
    soup = BeautifulSoup('<link rel="next" href="/p2"><div data-href="/x"></div>', "html.parser")
    assert select_links(soup, "div", "data-href", BASE) == ["https://docs.aws.amazon.com/x"]


def test_nested_fragment_sources_compose():
    inner = quote('<a href="/deep">deep</a>')
    outer = quote(f'<input value="{inner}">')
    soup = BeautifulSoup(f'<input value="{outer}">', "html.parser")
    sources = (
        DecodedFragmentSource(
            "input",
            "value",
            (DecodedFragmentSource("input", "value", (SelectorSource("a"),)),),
        ),
    )
    assert extract_links(soup, BASE, sources) == ["https://docs.aws.amazon.com/deep"]


def test_malformed_href_is_dropped():
    html = '<a href="/guide">ok</a><a href="http://[broken/">bad</a><a href="/api">ok</a>'
    assert discover_links(html, BASE) == [BASE + "guide", BASE + "api"]


def test_host_case_and_port_variants_stay_in_scope():
    html = (
        '<a href="https://docs.aws.amazon.com:443/guide">1</a>'
        '<a href="https://Docs.AWS.amazon.com/guide">2</a>'
    )
    assert discover_links(html, BASE) == [BASE + "guide"] * 2

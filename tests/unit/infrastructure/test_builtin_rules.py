"""Tests for the built-in rule table and the preset rule set."""

from __future__ import annotations

from linkharvest.domain.entities import ScanContext
from linkharvest.domain.rules import TORRENT_LINK_SELECTOR
from linkharvest.infrastructure.common.html_selectors import parse_html
from linkharvest.infrastructure.extraction import extract_links
from linkharvest.infrastructure.rules import (
    BUILTIN_RULES,
    GENERIC_RULE,
    PIRATEBAY_RULE,
    builtin_rules,
    preset_rules,
)


def test_generic_rule_closes_builtins() -> None:
    assert BUILTIN_RULES[-1] is GENERIC_RULE
    assert GENERIC_RULE.link_filter == "download_heuristics"
    assert [rule.id for rule in builtin_rules()] == ["piratebay", "generic"]


def test_builtin_rules_returns_copy() -> None:
    rules = builtin_rules()
    rules.clear()
    assert len(builtin_rules()) == 2


def test_presets_are_enabled_and_unique() -> None:
    presets = preset_rules()
    ids = [rule.id for rule in presets]

    assert len(presets) == 12
    assert len(set(ids)) == len(ids)
    assert all(rule.enabled for rule in presets)
    assert all(rule_id.startswith("preset-") for rule_id in ids)


def test_more_specific_presets_come_first() -> None:
    ids = [rule.id for rule in preset_rules()]
    assert ids.index("preset-eztv-home-follow") < ids.index("preset-eztv")
    assert ids.index("preset-dmhy-share") < ids.index("preset-dmhy")
    assert ids.index("preset-1337x-popular-movies") > ids.index("preset-1337x")


def test_follow_presets_use_torrent_detail_rule() -> None:
    follow_rules = [rule for rule in preset_rules() if rule.is_follow_rule]
    assert {rule.id for rule in follow_rules} == {
        "preset-eztv-home-follow",
        "preset-1337x-popular-movies",
    }
    for rule in follow_rules:
        assert rule.follow is not None
        assert rule.follow.limit == 30
        assert rule.follow.detail_rule.selectors.link == TORRENT_LINK_SELECTOR


def test_piratebay_seven_column_layout() -> None:
    html = """\
    <table id="searchResult">
      <tr><th>Type</th><th>Name</th></tr>
      <tr>
        <td><a href="/browse/201">Video</a></td>
        <td><div class="detName"><a href="/torrent/1/">Some.Movie.2026.1080p</a></div></td>
        <td>04-12 2026</td>
        <td><a href="magnet:?xt=urn:btih:aaa&dn=Some.Movie.2026.1080p.WEB">m</a></td>
        <td>1.4 GiB</td>
        <td>1,234</td>
        <td>56</td>
      </tr>
    </table>
    """
    ctx = ScanContext(host="thepiratebay.org", url="https://thepiratebay.org/search/x")
    links = extract_links(parse_html(html), ctx, PIRATEBAY_RULE)

    assert len(links) == 1
    link = links[0]
    assert link.title == "Some.Movie.2026.1080p.WEB"
    assert link.seeders == 1234
    assert link.leechers == 56

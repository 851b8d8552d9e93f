"""Tests for rule matching and resolution order."""

from __future__ import annotations

import pytest

from linkharvest.domain.entities import ScanContext
from linkharvest.domain.rules import RuleMatch, RuleSelectors, SiteRule
from linkharvest.infrastructure.rules import (
    GENERIC_RULE,
    PIRATEBAY_RULE,
    matches,
    preset_rules,
    resolve_rule,
)


def _ctx(host: str, path: str = "/") -> ScanContext:
    return ScanContext(host=host, url=f"https://{host}{path}")


def _rule(rule_id: str, match: RuleMatch, *, enabled: bool = True) -> SiteRule:
    return SiteRule(
        id=rule_id,
        name=rule_id.title(),
        mode="page",
        match=match,
        selectors=RuleSelectors(link='a[href^="magnet:"]'),
        enabled=enabled,
    )


class TestMatches:
    def test_empty_match_is_universal(self) -> None:
        assert matches(RuleMatch(), _ctx("anything.test"))

    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("nyaa.si", True),
            ("sukebei.nyaa.si", True),
            ("mirror.example", True),
            ("nyaa.si.evil.test", False),
        ],
    )
    def test_host_suffix_or(self, host: str, expected: bool) -> None:
        match = RuleMatch(host_suffix=("nyaa.si", "mirror.example"))
        assert matches(match, _ctx(host)) is expected

    def test_path_regex_searches_path_only(self) -> None:
        match = RuleMatch(path_regex="^/torrent/")
        assert matches(match, _ctx("1337x.to", "/torrent/123/foo/"))
        assert not matches(match, _ctx("1337x.to", "/search/torrent/"))
        # Query strings are not part of the path
        assert not matches(match, ScanContext(host="x.test", url="https://x.test/?p=/torrent/"))

    def test_host_and_path_both_required(self) -> None:
        match = RuleMatch(host_suffix=("yts.mx",), path_regex="/movies/")
        assert matches(match, _ctx("yts.mx", "/movies/abc"))
        assert not matches(match, _ctx("yts.mx", "/browse"))
        assert not matches(match, _ctx("other.test", "/movies/abc"))

    def test_invalid_regex_never_matches(self) -> None:
        assert not matches(RuleMatch(path_regex="(unclosed"), _ctx("a.test"))
        assert not matches(RuleMatch(host_regex="[bad"), _ctx("a.test"))

    @pytest.mark.parametrize(
        "host",
        ["thepiratebay.org", "www.PirateBay.party", "tpb.party"],
    )
    def test_piratebay_host_family(self, host: str) -> None:
        assert matches(PIRATEBAY_RULE.match, _ctx(host))


class TestResolveRule:
    def test_custom_rule_wins_over_builtin(self) -> None:
        custom = _rule("override-nyaa", RuleMatch(host_suffix=("nyaa.si",)))
        active = resolve_rule(_ctx("nyaa.si"), [custom])

        assert active.id == "custom:override-nyaa"
        assert active.name == "Override-Nyaa"
        assert active.custom is True
        assert active.rule is custom

    def test_first_matching_custom_rule_wins(self) -> None:
        first = _rule("first", RuleMatch())
        second = _rule("second", RuleMatch())
        assert resolve_rule(_ctx("a.test"), [first, second]).id == "custom:first"

    def test_disabled_custom_rule_skipped(self) -> None:
        disabled = _rule("off", RuleMatch(), enabled=False)
        fallback = _rule("on", RuleMatch())
        assert resolve_rule(_ctx("a.test"), [disabled, fallback]).id == "custom:on"

    def test_builtin_piratebay(self) -> None:
        active = resolve_rule(_ctx("thepiratebay.org", "/search.php?q=x"))
        assert active.id == "piratebay"
        assert active.custom is False
        assert active.aggregate == "ranked"

    def test_generic_fallback(self) -> None:
        active = resolve_rule(_ctx("unknown.test"))
        assert active.id == "generic"
        assert active.rule is GENERIC_RULE
        assert active.aggregate == "default"

    def test_generic_fallback_without_builtins(self) -> None:
        assert resolve_rule(_ctx("unknown.test"), builtin_rules=()).id == "generic"

    def test_custom_rule_never_ranked(self) -> None:
        custom = SiteRule(
            id="ranked-custom",
            name="Ranked",
            mode="page",
            match=RuleMatch(),
            selectors=RuleSelectors(link="a"),
            aggregate="ranked",
        )
        assert resolve_rule(_ctx("a.test"), [custom]).aggregate == "default"

    @pytest.mark.parametrize(
        ("host", "path", "expected"),
        [
            ("eztv.re", "/", "custom:preset-eztv-home-follow"),
            ("eztv.re", "/home", "custom:preset-eztv-home-follow"),
            ("eztv.re", "/shows/123/", "custom:preset-eztv"),
            ("share.dmhy.org", "/", "custom:preset-dmhy-share"),
            ("dmhy.org", "/topics/list", "custom:preset-dmhy"),
            ("1377x.to", "/popular-movies", "custom:preset-1337x-popular-movies"),
            ("1337x.to", "/torrent/1/foo/", "custom:preset-1337x"),
            ("yts.mx", "/movies/foo-2026", "custom:preset-yts"),
            ("yts.mx", "/browse-movies", "generic"),
        ],
    )
    def test_presets_as_custom_rules(self, host: str, path: str, expected: str) -> None:
        assert resolve_rule(_ctx(host, path), preset_rules()).id == expected

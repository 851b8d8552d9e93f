"""Built-in site rules and the ready-made preset rule set.

Built-ins are always eligible and are tried after every custom rule, in
``BUILTIN_RULES`` order; the generic rule matches everything and closes
the list.  Presets are ordinary custom rules offered to users who do not
want to author selectors for popular trackers themselves.
"""

from __future__ import annotations

from linkharvest.domain.rules import (
    TORRENT_LINK_SELECTOR,
    DetailRule,
    ExtractConfig,
    FollowConfig,
    RuleMatch,
    RuleSelectors,
    SiteRule,
)
from linkharvest.infrastructure.extraction import GENERIC_LINK_SELECTOR

PIRATEBAY_RULE = SiteRule(
    id="piratebay",
    name="PirateBay",
    mode="row",
    match=RuleMatch(host_regex=r"thepiratebay|piratebay|tpb"),
    selectors=RuleSelectors(
        row="tr, li.list-entry",
        link=TORRENT_LINK_SELECTOR,
        title=".detName a, .item-title a",
        # Cell positions differ between the classic and the 7-column layout;
        # date and icon cells never parse as integers.
        seeders=".item-seed, td:nth-of-type(6), td:nth-of-type(3)",
        leechers=".item-leech, td:nth-of-type(7), td:nth-of-type(4)",
        size=".item-size",
    ),
    aggregate="ranked",
)

GENERIC_RULE = SiteRule(
    id="generic",
    name="Generic",
    mode="page",
    match=RuleMatch(),
    selectors=RuleSelectors(link=GENERIC_LINK_SELECTOR),
    link_filter="download_heuristics",
)

BUILTIN_RULES: tuple[SiteRule, ...] = (PIRATEBAY_RULE, GENERIC_RULE)


def builtin_rules() -> list[SiteRule]:
    return list(BUILTIN_RULES)


# Detail pages reached through a follow step: one h1 title, magnet/torrent links.
_DETAIL_PAGE = DetailRule(
    mode="page",
    selectors=RuleSelectors(link=TORRENT_LINK_SELECTOR, title="h1"),
    extract=ExtractConfig(title_fallback=("magnetDn", "anchorText", "rowText", "href")),
)


def _page_rule(rule_id: str, name: str, hosts: tuple[str, ...], path: str, link: str = TORRENT_LINK_SELECTOR) -> SiteRule:
    return SiteRule(
        id=rule_id,
        name=name,
        mode="page",
        match=RuleMatch(host_suffix=hosts, path_regex=path),
        selectors=RuleSelectors(link=link, title="h1"),
    )


PRESET_RULES: tuple[SiteRule, ...] = (
    SiteRule(
        id="preset-mikan",
        name="Mikan Project (list)",
        mode="row",
        match=RuleMatch(host_suffix=("mikanani.me",), path_regex="^/"),
        selectors=RuleSelectors(
            row="table tbody tr, .mikan-table tbody tr",
            link=TORRENT_LINK_SELECTOR,
            title='td:nth-child(2) a, a.magnet, a[href$=".torrent"]',
        ),
    ),
    SiteRule(
        id="preset-dmhy-share",
        name="DMHY share (list)",
        mode="row",
        match=RuleMatch(host_suffix=("share.dmhy.org",), path_regex="^/"),
        selectors=RuleSelectors(
            row="#topic_list tbody tr",
            link='a.download-arrow.arrow-magnet[href^="magnet:"]',
            title='td.title > a[href^="/topics/view/"]',
            size="td:nth-child(5)",
            seeders="td:nth-child(6)",
        ),
    ),
    SiteRule(
        id="preset-dmhy",
        name="DMHY (list)",
        mode="row",
        match=RuleMatch(host_suffix=("dmhy.org",), path_regex="^/"),
        selectors=RuleSelectors(
            row="#topic_list tbody tr",
            link='a.download-arrow.arrow-magnet[href^="magnet:"]',
            # The first anchor in td.title is the fansub group, not the release
            title='td.title > a[href^="/topics/view/"]',
            size="td:nth-child(5)",
            seeders="td:nth-child(6)",
        ),
    ),
    _page_rule("preset-bangumi-moe", "Bangumi.moe (page)", ("bangumi.moe",), "^/"),
    SiteRule(
        id="preset-acg-rip",
        name="ACG.RIP (list)",
        mode="row",
        match=RuleMatch(host_suffix=("acg.rip",), path_regex="^/"),
        selectors=RuleSelectors(
            row="table tbody tr, .table tbody tr",
            link=TORRENT_LINK_SELECTOR,
            title='td.title a, td:nth-child(2) a, a[href$=".torrent"]',
        ),
    ),
    SiteRule(
        id="preset-nyaa",
        name="Nyaa (list)",
        mode="row",
        match=RuleMatch(host_suffix=("nyaa.si",), path_regex="^/"),
        selectors=RuleSelectors(
            row="table tbody tr",
            link='a[href^="magnet:"]',
            title="td:nth-child(2) a",
        ),
    ),
    _page_rule(
        "preset-yts",
        "YTS (detail)",
        ("yts.mx", "yts.lt"),
        "/movies/",
        link='a[href^="magnet:"]',
    ),
    # The home follow rule precedes the list rule, whose "^/" path also matches home.
    SiteRule(
        id="preset-eztv-home-follow",
        name="EZTV (home list, follow details)",
        mode="page",
        match=RuleMatch(host_suffix=("eztv.re", "eztv.wf", "eztv.yt"), path_regex="^/(home)?/?$"),
        selectors=RuleSelectors(link=TORRENT_LINK_SELECTOR),
        follow=FollowConfig(
            href_selector='a.epinfo[href^="/ep/"]',
            detail_rule=_DETAIL_PAGE,
        ),
    ),
    SiteRule(
        id="preset-eztv",
        name="EZTV (list)",
        mode="row",
        match=RuleMatch(host_suffix=("eztv.re", "eztv.wf", "eztv.yt"), path_regex="^/"),
        selectors=RuleSelectors(
            row="table tr.forum_header_border",
            link='a[href^="magnet:"]',
            title="td:nth-child(2) a",
        ),
    ),
    _page_rule("preset-1337x", "1337x (detail)", ("1337x.to", "1377x.to"), "^/torrent/"),
    SiteRule(
        id="preset-1337x-popular-movies",
        name="1337x (popular-movies list, follow details)",
        mode="page",
        match=RuleMatch(host_suffix=("1337x.to", "1377x.to"), path_regex="^/popular-movies/?$"),
        selectors=RuleSelectors(link=TORRENT_LINK_SELECTOR),
        follow=FollowConfig(
            href_selector='table.table-list a[href^="/torrent/"]',
            detail_rule=_DETAIL_PAGE,
        ),
    ),
    _page_rule("preset-torrentgalaxy", "TorrentGalaxy (detail)", ("torrentgalaxy.to",), "^/torrent/"),
)


def preset_rules() -> list[SiteRule]:
    """Ready-made custom rules for popular trackers (all enabled)."""
    return list(PRESET_RULES)

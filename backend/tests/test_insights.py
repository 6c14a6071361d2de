"""Tests for the portfolio insights aggregator."""

from collections import Counter

import pytest

from adinsights.core.insights import (
    build_all_insights,
    composite_score,
    count_values,
    primary_scores,
    render_bucket,
    round_half_up,
)
from adinsights.schemas import AnalysisResult, Asset


def _scores(catchiness, aesthetics, readability, brand_fit, memorability):
    return {
        "catchiness_level": catchiness,
        "aesthetics_score": aesthetics,
        "readability_score": readability,
        "brand_fit_score": brand_fit,
        "memorability_score": memorability,
    }


class TestEndToEnd:
    """Two analysed beverage ads."""

    @pytest.fixture
    def report(self, make_asset):
        a = make_asset("A", product_category="beverage", best_platforms=["tiktok"], **_scores(90, 80, 70, 60, 50))
        b = make_asset("B", product_category="beverage", best_platforms=["meta"], **_scores(50, 50, 50, 50, 50))
        return build_all_insights([a, b])

    def test_totals(self, report):
        assert report.totals.analyzed == 2

    def test_averages(self, report):
        assert report.averages.aesthetics == 65
        assert report.averages.catchiness == 70
        assert report.averages.readability == 60
        assert report.averages.brand_fit == 55
        assert report.averages.memorability == 50

    def test_buckets(self, report):
        assert [(e.key, e.count) for e in report.top_categories] == [("beverage", 2)]
        assert [(e.key, e.count) for e in report.best_platforms] == [("tiktok", 1), ("meta", 1)]

    def test_leaderboard(self, report):
        assert [(e.id, e.score) for e in report.asset_summary_top10] == [("A", 70.0), ("B", 50.0)]


def test_filter_excludes_unfinished_and_empty_results(make_asset):
    """Only done assets with a non-empty result contribute anywhere."""
    counted = make_asset(
        "done",
        product_category="shoes",
        best_platforms=["meta"],
        audio_visual_signals={"color_palette": ["#111111"]},
        target_audience={"age_ranges": ["25-34"]},
        dimension_profile={"aesthetics": 50, "memorability": 50},
        **_scores(100, 100, 100, 100, 100),
    )
    unfinished = dict(
        product_category="cars",
        sentiment="negative",
        tone="urgent",
        best_platforms=["snapchat"],
        audio_visual_signals={"color_palette": ["#FF0000"]},
        target_audience={"age_ranges": ["65+"]},
        dimension_profile={
            "creative_attention": 99,
            "aesthetics": 99,
            "readability": 99,
            "brandFit": 99,
            "memorability": 99,
        },
        **_scores(10, 10, 10, 10, 10),
    )
    ignored = [
        make_asset("pending", status="pending", **unfinished),
        make_asset("processing", status="processing", **unfinished),
        make_asset("error", status="error", **unfinished),
        make_asset("no-result", status="done"),
        make_asset("empty-result", status="done", result=AnalysisResult()),
    ]

    report = build_all_insights([*ignored, counted])

    assert report.totals.analyzed == 1
    assert [e.key for e in report.top_categories] == ["shoes"]
    assert report.sentiment_distribution == []
    assert report.tone_distribution == []
    assert [e.key for e in report.best_platforms] == ["meta"]
    assert [e.key for e in report.top_colors] == ["#111111"]
    assert [e.key for e in report.audience_age_ranges] == ["25-34"]
    assert report.averages.catchiness == 100
    assert [e.id for e in report.asset_summary_top10] == ["done"]

    leaders = report.dimension_profile.model_dump()
    assert leaders["creative_attention"] == []
    assert leaders["readability"] == []
    assert leaders["brand_fit"] == []
    assert leaders["aesthetics"] == [{"id": "done", "score": 50}]
    assert leaders["memorability"] == [{"id": "done", "score": 50}]


def test_empty_input_is_safe():
    report = build_all_insights([])

    assert report.totals.analyzed == 0
    assert report.averages.model_dump() == {
        "aesthetics": 0,
        "catchiness": 0,
        "readability": 0,
        "brand_fit": 0,
        "memorability": 0,
    }
    for table in (
        report.top_categories,
        report.sentiment_distribution,
        report.tone_distribution,
        report.top_colors,
        report.audience_age_ranges,
        report.best_platforms,
        report.asset_summary_top10,
    ):
        assert table == []
    assert all(entries == [] for entries in report.dimension_profile.model_dump().values())


def test_only_unanalysed_assets_behaves_like_empty(make_asset):
    report = build_all_insights([make_asset("p", status="pending"), make_asset("e", status="error")])
    assert report.totals.analyzed == 0
    assert report.averages.aesthetics == 0
    assert report.asset_summary_top10 == []


def test_bucket_tables_are_truncated(make_asset):
    assets = [
        make_asset(
            f"a{i}",
            product_category=f"category-{i}",
            tone=f"tone-{i}",
            best_platforms=[f"platform-{i}"],
            audio_visual_signals={"color_palette": [f"#{i:06x}"]},
            target_audience={"age_ranges": [f"{i}-{i + 5}"]},
        )
        for i in range(20)
    ]

    report = build_all_insights(assets)

    assert len(report.top_categories) == 10
    assert len(report.tone_distribution) == 10
    assert len(report.best_platforms) == 10
    assert len(report.audience_age_ranges) == 10
    assert len(report.top_colors) == 12


def test_bucket_tables_sorted_by_count_with_first_seen_ties(make_asset):
    assets = [
        make_asset("a1", tone="calm"),
        make_asset("a2", tone="bold"),
        make_asset("a3", tone="urgent"),
        make_asset("a4", tone="urgent"),
        make_asset("a5", tone="bold"),
        make_asset("a6", tone="urgent"),
    ]

    report = build_all_insights(assets)

    assert [(e.key, e.count) for e in report.tone_distribution] == [
        ("urgent", 3),
        ("bold", 2),
        ("calm", 1),
    ]
    counts = [e.count for e in report.tone_distribution]
    assert counts == sorted(counts, reverse=True)


def test_multi_valued_fields_count_every_element(make_asset):
    asset = make_asset("a1", best_platforms=["tiktok", "tiktok", "meta"])

    report = build_all_insights([asset])

    assert [(e.key, e.count) for e in report.best_platforms] == [("tiktok", 2), ("meta", 1)]


def test_colors_are_lowercased(make_asset):
    assets = [
        make_asset("a1", audio_visual_signals={"color_palette": ["#FFAA00", "#0033cc"]}),
        make_asset("a2", audio_visual_signals={"color_palette": ["#ffaa00"]}),
    ]

    report = build_all_insights(assets)

    assert [(e.key, e.count) for e in report.top_colors] == [("#ffaa00", 2), ("#0033cc", 1)]


def test_empty_values_never_become_bucket_keys(make_asset):
    assets = [
        make_asset("a1", product_category="", tone="warm", sentiment="neutral", best_platforms=["", "meta"]),
        make_asset("a2", catchiness_level=40, target_audience={"age_ranges": ["", "18-24"]}),
    ]

    report = build_all_insights(assets)

    assert report.top_categories == []
    assert [e.key for e in report.best_platforms] == ["meta"]
    assert [e.key for e in report.audience_age_ranges] == ["18-24"]
    assert [e.key for e in report.sentiment_distribution] == ["neutral"]


def test_averages_round_to_integers(make_asset):
    """250 over three assets averages 83.33, reported as 83."""
    assets = [
        make_asset("a1", aesthetics_score=100),
        make_asset("a2", aesthetics_score=100),
        make_asset("a3", aesthetics_score=50),
    ]

    report = build_all_insights(assets)

    assert report.averages.aesthetics == 83
    assert isinstance(report.averages.aesthetics, int)


def test_averages_round_halves_up(make_asset):
    assets = [make_asset("a1", readability_score=82), make_asset("a2", readability_score=83)]

    report = build_all_insights(assets)

    assert report.averages.readability == 83


def test_missing_scores_count_as_zero_in_averages(make_asset):
    assets = [make_asset("a1", memorability_score=80), make_asset("a2", tone="calm")]

    report = build_all_insights(assets)

    assert report.averages.memorability == 40


def test_composite_divides_by_five_even_when_scores_missing(make_asset):
    asset = make_asset("a1", catchiness_level=80, aesthetics_score=70)

    report = build_all_insights([asset])

    assert report.asset_summary_top10[0].score == 30


def test_leaderboard_keeps_top_ten_in_descending_order(make_asset):
    assets = [make_asset(f"a{i}", **_scores(i * 5, i * 5, i * 5, i * 5, i * 5)) for i in range(15)]

    report = build_all_insights(assets)

    leaderboard = report.asset_summary_top10
    assert len(leaderboard) == 10
    assert leaderboard[0].id == "a14"
    scores = [e.score for e in leaderboard]
    assert scores == sorted(scores, reverse=True)


def test_leaderboard_ties_keep_input_order(make_asset):
    assets = [make_asset(name, catchiness_level=50) for name in ("first", "second", "third")]

    report = build_all_insights(assets)

    assert [e.id for e in report.asset_summary_top10] == ["first", "second", "third"]


def test_leaderboard_title_uses_summary_prefix_or_url(make_asset):
    long_summary = "x" * 120
    assets = [
        make_asset("with-summary", summary=long_summary, catchiness_level=90),
        make_asset("blank-summary", summary="", catchiness_level=80, url="https://cdn.example.com/b.mp4"),
        make_asset("no-summary", catchiness_level=70, url="https://cdn.example.com/c.png"),
    ]

    report = build_all_insights(assets)

    titles = {e.id: e.title for e in report.asset_summary_top10}
    assert titles["with-summary"] == "x" * 80
    assert titles["blank-summary"] == "https://cdn.example.com/b.mp4"
    assert titles["no-summary"] == "https://cdn.example.com/c.png"


def test_dimension_leaders_use_only_present_numeric_subscores(make_asset):
    assets = [
        make_asset("a1", dimension_profile={"aesthetics": 90}),
        make_asset("a2", tone="calm"),
        make_asset("a3", dimension_profile={"aesthetics": "high", "readability": 40}),
        make_asset("a4", dimension_profile={"brandFit": 77, "creative_attention": None}),
    ]

    report = build_all_insights(assets)
    leaders = report.dimension_profile

    assert [(e.id, e.score) for e in leaders.aesthetics] == [("a1", 90)]
    assert [(e.id, e.score) for e in leaders.readability] == [("a3", 40)]
    assert [(e.id, e.score) for e in leaders.brand_fit] == [("a4", 77)]
    assert leaders.creative_attention == []
    assert leaders.memorability == []


def test_dimension_leaders_keep_top_three(make_asset):
    assets = [
        make_asset("a1", dimension_profile={"memorability": 40}),
        make_asset("a2", dimension_profile={"memorability": 90}),
        make_asset("a3", dimension_profile={"memorability": 60}),
        make_asset("a4", dimension_profile={"memorability": 90}),
        make_asset("a5", dimension_profile={"memorability": 10}),
    ]

    report = build_all_insights(assets)

    assert [(e.id, e.score) for e in report.dimension_profile.memorability] == [
        ("a2", 90),
        ("a4", 90),
        ("a3", 60),
    ]


def test_fractional_subscores_rank_by_their_real_value(make_asset):
    assets = [
        make_asset("lower", dimension_profile={"aesthetics": 72.5}),
        make_asset("higher", dimension_profile={"aesthetics": 72.9}),
    ]

    report = build_all_insights(assets)

    assert [(e.id, e.score) for e in report.dimension_profile.aesthetics] == [("higher", 72.9), ("lower", 72.5)]


def test_fractional_scores_feed_composite_unrounded(make_asset):
    report = build_all_insights([make_asset("a1", catchiness_level=80.4)])

    assert report.asset_summary_top10[0].score == pytest.approx(16.08)
    assert report.averages.catchiness == 80


def test_unrecognised_asset_type_is_tolerated():
    records = [
        {"id": "x", "url": "https://cdn.example.com/x", "type": "carousel", "status": "done", "result": {"tone": "calm"}},
    ]

    report = build_all_insights(records)

    assert report.totals.analyzed == 1
    assert [e.key for e in report.tone_distribution] == ["calm"]


def test_accepts_plain_mappings(full_result):
    records = [
        {"id": "m1", "url": "https://cdn.example.com/m1.png", "status": "done", "result": full_result},
        {"id": "m2", "url": "https://cdn.example.com/m2.png", "status": "pending"},
    ]

    report = build_all_insights(records)

    assert report.totals.analyzed == 1
    assert [e.key for e in report.sentiment_distribution] == ["positive"]
    assert [(e.id, e.score) for e in report.dimension_profile.brand_fit] == [("m1", 64)]


def test_input_is_not_modified(make_asset, full_result):
    assets = [
        Asset(id="a1", url="https://cdn.example.com/a1.png", status="done", result=full_result),
        make_asset("a2", best_platforms=["meta"]),
    ]
    before = [asset.model_dump() for asset in assets]

    build_all_insights(assets)
    build_all_insights(assets)

    assert [asset.model_dump() for asset in assets] == before


def test_repeated_runs_are_identical(make_asset, full_result):
    assets = [
        Asset(id=f"a{i}", url=f"https://cdn.example.com/a{i}.png", status="done", result=full_result)
        for i in range(4)
    ]

    assert build_all_insights(assets) == build_all_insights(assets)


def test_report_serialises_with_camel_case_brand_fit(make_asset):
    report = build_all_insights([make_asset("a1", brand_fit_score=60, dimension_profile={"brandFit": 61})])

    payload = report.model_dump(by_alias=True)

    assert payload["averages"]["brandFit"] == 60
    assert payload["dimension_profile"]["brandFit"] == [{"id": "a1", "score": 61}]
    assert set(payload) == {
        "totals",
        "averages",
        "top_categories",
        "sentiment_distribution",
        "tone_distribution",
        "top_colors",
        "audience_age_ranges",
        "best_platforms",
        "dimension_profile",
        "asset_summary_top10",
    }


def test_helpers():
    counter = Counter()
    count_values(counter, ["a", None, "", "b", "a"])
    assert render_bucket(counter, 1)[0].model_dump() == {"key": "a", "count": 2}

    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2

    scores = primary_scores(AnalysisResult(catchiness_level=80, aesthetics_score=70))
    assert scores["readability"] == 0
    assert composite_score(scores) == 30

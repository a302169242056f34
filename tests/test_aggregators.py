"""Tests for the news and scores aggregation engines."""

import dataclasses
from datetime import date, timedelta

import pytest

from conftest import (
    BASE_TIME,
    FakeNewsProvider,
    FakeScoresProvider,
    make_article,
    make_score,
)
from sports_aggregator.core.cache import ResultCache
from sports_aggregator.core.exceptions import NetworkTimeoutError, RateLimitedError, UpstreamHTTPError
from sports_aggregator.core.health_registry import ProviderHealthRegistry
from sports_aggregator.models import SportId
from sports_aggregator.providers.registry import ProviderSet
from sports_aggregator.services.news_aggregator import NewsAggregator
from sports_aggregator.services.scores_aggregator import ScoresAggregator


def build_news(clock, *providers, ttl=timedelta(minutes=5)):
    registry = ProviderHealthRegistry(clock=clock)
    aggregator = NewsAggregator(
        ProviderSet(list(providers)),
        registry,
        priority=[p.name for p in providers],
        cache_ttl=ttl,
        clock=clock,
    )
    return aggregator, registry


def build_scores(clock, *providers):
    registry = ProviderHealthRegistry(clock=clock)
    aggregator = ScoresAggregator(
        ProviderSet(list(providers)),
        registry,
        priority=[p.name for p in providers],
        cache_ttl=timedelta(minutes=1),
        clock=clock,
    )
    return aggregator, registry


class TestMerge:
    async def test_duplicate_urls_keep_first_in_priority_order(self, clock):
        primary = FakeNewsProvider("primary", [make_article("https://x/1", hours_ago=1, source="primary")])
        secondary = FakeNewsProvider("secondary", [
            make_article("https://x/1", hours_ago=0, source="secondary"),
            make_article("https://x/2", hours_ago=2, source="secondary"),
        ])
        news, _ = build_news(clock, primary, secondary)

        result = await news.get_latest(limit=10)

        assert [a.url for a in result.items] == ["https://x/1", "https://x/2"]
        assert result.items[0].source == "primary"

    async def test_sorted_newest_first_and_truncated(self, clock):
        provider = FakeNewsProvider("p", [
            make_article(f"https://x/{hours}", hours_ago=hours) for hours in (5, 1, 3, 0, 4, 2)
        ])
        news, _ = build_news(clock, provider)

        result = await news.get_latest(limit=4)

        published = [a.published_at for a in result.items]
        assert len(published) == 4
        assert all(a >= b for a, b in zip(published, published[1:]))
        assert published[0] == BASE_TIME

    async def test_sport_filter_drops_other_sports(self, clock):
        provider = FakeNewsProvider("p", [
            make_article("https://x/nba", sport=SportId.BASKETBALL),
            make_article("https://x/epl", sport=SportId.SOCCER),
            make_article("https://x/nfl", sport=SportId.FOOTBALL),
        ])
        news, _ = build_news(clock, provider)

        result = await news.get_latest(SportId.SOCCER, limit=10)

        assert [a.url for a in result.items] == ["https://x/epl"]
        assert all(a.sport_id == SportId.SOCCER for a in result.items)

    async def test_scores_deduplicate_by_id(self, clock):
        first = FakeScoresProvider("first", [make_score("espn_1", hours_ago=1, source="first")])
        second = FakeScoresProvider("second", [
            make_score("espn_1", hours_ago=0, source="second"),
            make_score("sportsdb_1", hours_ago=3),
        ])
        scores, _ = build_scores(clock, first, second)

        result = await scores.get_latest(limit=10)

        assert [s.id for s in result.items] == ["espn_1", "sportsdb_1"]
        assert result.items[0].source == "first"


class TestCache:
    async def test_second_call_within_ttl_is_served_from_cache(self, clock):
        provider = FakeNewsProvider("p", [make_article("https://x/1")])
        news, _ = build_news(clock, provider)

        first = await news.get_latest(limit=10)
        clock.advance(minutes=4)
        second = await news.get_latest(limit=10)

        assert provider.calls == 1
        assert second.from_cache is True
        assert second.last_updated == first.last_updated
        assert [a.url for a in second.items] == [a.url for a in first.items]

    async def test_expired_entry_triggers_new_fetch(self, clock):
        provider = FakeNewsProvider("p", [make_article("https://x/1")])
        news, _ = build_news(clock, provider)

        first = await news.get_latest(limit=10)
        clock.advance(minutes=5, seconds=1)
        second = await news.get_latest(limit=10)

        assert provider.calls == 2
        assert second.from_cache is False
        assert second.last_updated > first.last_updated

    async def test_refresh_bypasses_read_but_writes(self, clock):
        provider = FakeNewsProvider("p", [make_article("https://x/1")])
        news, _ = build_news(clock, provider)

        await news.get_latest(limit=10)
        clock.advance(seconds=30)
        refreshed = await news.get_latest(limit=10, use_cache=False)
        cached = await news.get_latest(limit=10)

        assert provider.calls == 2
        assert cached.from_cache is True
        assert cached.last_updated == refreshed.last_updated

    async def test_cache_is_keyed_by_sport_and_limit(self, clock):
        provider = FakeNewsProvider("p", [make_article("https://x/1")])
        news, _ = build_news(clock, provider)

        await news.get_latest(limit=10)
        await news.get_latest(limit=20)
        await news.get_latest(SportId.BASKETBALL, limit=10)

        assert provider.calls == 3
        assert sorted(news.cache_stats()["keys"]) == [
            "news_all_10", "news_all_20", "news_basketball_10",
        ]

    async def test_cached_items_cannot_be_modified(self, clock):
        provider = FakeNewsProvider("p", [make_article("https://x/1", tags=["trade"])])
        news, _ = build_news(clock, provider)

        first = await news.get_latest(limit=10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            first.items[0].title = "Edited"
        first.items.append(make_article("https://x/extra"))

        cached = await news.get_latest(limit=10)
        assert cached.from_cache is True
        assert [a.url for a in cached.items] == ["https://x/1"]
        assert cached.items[0].title == "Headline"
        assert cached.items[0].tags == ("trade",)

    async def test_clear_cache(self, clock):
        provider = FakeNewsProvider("p", [make_article("https://x/1")])
        news, _ = build_news(clock, provider)

        await news.get_latest(limit=10)
        assert news.clear_cache() == 1
        await news.get_latest(limit=10)

        assert provider.calls == 2

    async def test_scores_ttl_is_shorter(self, clock):
        provider = FakeScoresProvider("s", [make_score("1")])
        scores, _ = build_scores(clock, provider)

        await scores.get_latest(limit=10)
        clock.advance(seconds=61)
        await scores.get_latest(limit=10)

        assert provider.calls == 2

    def test_result_cache_entries_are_immutable_tuples(self, clock):
        cache = ResultCache(timedelta(minutes=1), clock=clock)
        items = [1, 2]
        entry = cache.set("k", items)
        items.append(3)
        assert cache.get("k").value == (1, 2)
        assert entry.computed_at == clock.now


class TestFailures:
    async def test_partial_failure_bookkeeping(self, clock):
        good = FakeNewsProvider("good", [
            make_article("https://x/a", hours_ago=2),
            make_article("https://x/a", hours_ago=1),
            make_article("https://x/b", hours_ago=0),
        ])
        timeout = FakeNewsProvider("timeout", error=NetworkTimeoutError("timeout", "Timed out after 10s"))
        broken = FakeNewsProvider("broken", error=UpstreamHTTPError("broken", 500))
        news, registry = build_news(clock, good, timeout, broken)
        registry.record_failure("good", "earlier problem")

        result = await news.get_latest(limit=10)

        assert registry.get_status("timeout").consecutive_failures == 1
        assert registry.get_status("timeout").last_error == "timeout: Timed out after 10s"
        assert registry.get_status("broken").consecutive_failures == 1
        assert registry.get_status("good").consecutive_failures == 0
        assert registry.get_status("good").last_success_at == clock.now
        assert [a.url for a in result.items] == ["https://x/b", "https://x/a"]
        assert result.is_fallback is False

    async def test_total_outage_returns_fallback_for_sport(self, clock):
        news, registry = build_news(
            clock,
            FakeNewsProvider("a", error=NetworkTimeoutError("a", "timeout")),
            FakeNewsProvider("b", error=UpstreamHTTPError("b", 503)),
        )

        result = await news.get_latest(SportId.FOOTBALL, limit=10)

        assert result.is_fallback is True
        assert [a.id for a in result.items] == ["sample_news_2"]
        assert news.cache_stats()["size"] == 0

    async def test_fallback_is_truncated(self, clock):
        news, _ = build_news(clock, FakeNewsProvider("a", error=NetworkTimeoutError("a", "timeout")))
        result = await news.get_latest(limit=2)
        assert len(result.items) == 2

    async def test_empty_results_fall_back(self, clock):
        provider = FakeNewsProvider("empty", [])
        news, registry = build_news(clock, provider)

        result = await news.get_latest(limit=10)

        assert result.is_fallback is True
        assert registry.get_status("empty").consecutive_failures == 0

    async def test_unhealthy_providers_are_skipped(self, clock):
        flaky = FakeNewsProvider("flaky", error=NetworkTimeoutError("flaky", "timeout"))
        steady = FakeNewsProvider("steady", [make_article("https://x/1")])
        news, registry = build_news(clock, flaky, steady)

        for _ in range(3):
            await news.get_latest(limit=10, use_cache=False)
        assert registry.get_status("flaky").is_healthy is False

        await news.get_latest(limit=10, use_cache=False)
        assert flaky.calls == 3
        assert steady.calls == 4

    async def test_unhealthy_score_providers_are_skipped(self, clock):
        flaky = FakeScoresProvider("flaky_scores", error=NetworkTimeoutError("flaky_scores", "timeout"))
        steady = FakeScoresProvider("steady_scores", [make_score("espn_1")])
        scores, registry = build_scores(clock, flaky, steady)

        for _ in range(3):
            await scores.get_latest(limit=10, use_cache=False)
        assert registry.get_status("flaky_scores").is_healthy is False

        result = await scores.get_latest(limit=10, use_cache=False)
        assert flaky.calls == 3
        assert steady.calls == 4
        assert [s.id for s in result.items] == ["espn_1"]

    async def test_rate_limited_score_provider_is_paused(self, clock):
        throttled = FakeScoresProvider("throttled_scores", error=RateLimitedError("throttled_scores", retry_after=60))
        scores, registry = build_scores(clock, throttled, FakeScoresProvider("ok", [make_score("1")]))

        await scores.get_latest(limit=10, use_cache=False)
        await scores.get_latest(limit=10, use_cache=False)
        assert throttled.calls == 1
        assert registry.is_available("throttled_scores") is False

        clock.advance(seconds=61)
        await scores.get_latest(limit=10, use_cache=False)
        assert throttled.calls == 2

    async def test_no_available_providers_skips_network(self, clock):
        provider = FakeNewsProvider("p", [make_article("https://x/1")])
        news, registry = build_news(clock, provider)
        for _ in range(3):
            registry.record_failure("p", "down")

        result = await news.get_latest(limit=10)

        assert provider.calls == 0
        assert result.is_fallback is True

    async def test_rate_limited_provider_is_paused(self, clock):
        throttled = FakeNewsProvider("throttled", error=RateLimitedError("throttled", retry_after=120))
        news, registry = build_news(clock, throttled, FakeNewsProvider("ok", [make_article("https://x/1")]))

        await news.get_latest(limit=10)

        status = registry.get_status("throttled")
        assert status.consecutive_failures == 1
        assert status.last_error == "throttled: Rate limited"
        assert status.rate_limit_remaining == 0
        assert status.rate_limit_reset_at == clock.now + timedelta(seconds=120)
        assert registry.is_available("throttled") is False

    async def test_rate_limit_metadata_is_recorded_on_success(self, clock):
        reset_at = BASE_TIME + timedelta(hours=1)
        provider = FakeNewsProvider(
            "metered", [make_article("https://x/1")], rate_limit_remaining=0, rate_limit_reset_at=reset_at
        )
        news, registry = build_news(clock, provider)

        await news.get_latest(limit=10)

        assert registry.get_status("metered").rate_limit_remaining == 0
        assert registry.is_available("metered") is False

    async def test_unexpected_provider_bug_counts_as_failure(self, clock):
        buggy = FakeNewsProvider("buggy", error=KeyError("headline"))
        news, registry = build_news(clock, buggy, FakeNewsProvider("ok", [make_article("https://x/1")]))

        result = await news.get_latest(limit=10)

        assert registry.get_status("buggy").consecutive_failures == 1
        assert [a.url for a in result.items] == ["https://x/1"]

    async def test_internal_fault_falls_back(self, clock, monkeypatch):
        news, _ = build_news(clock, FakeNewsProvider("p", [make_article("https://x/1")]))

        def explode(*args, **kwargs):
            raise RuntimeError("merge exploded")

        monkeypatch.setattr(news, "merge", explode)
        result = await news.get_latest(SportId.SOCCER, limit=10)

        assert result.is_fallback is True
        assert [a.sport_id for a in result.items] == [SportId.SOCCER]

    async def test_scores_total_outage_uses_sample_scores(self, clock):
        scores, _ = build_scores(clock, FakeScoresProvider("s", error=UpstreamHTTPError("s", 500)))

        result = await scores.get_latest(SportId.BASKETBALL, limit=10)

        assert result.is_fallback is True
        assert [s.id for s in result.items] == ["sample_score_1"]

    def test_unknown_priority_names_are_ignored(self, clock):
        registry = ProviderHealthRegistry(clock=clock)
        news = NewsAggregator(
            ProviderSet([FakeNewsProvider("espn")]),
            registry,
            priority=["espn", "ghost", "espn"],
            cache_ttl=timedelta(minutes=5),
            clock=clock,
        )
        assert news.priority == ["espn"]
        assert [s.name for s in registry.get_all_statuses()] == ["espn"]


class TestCategory:
    async def test_filters_by_category_or_tag(self, clock):
        provider = FakeNewsProvider("p", [
            make_article("https://x/1", hours_ago=0, category="trade", tags=["trade"]),
            make_article("https://x/2", hours_ago=1, category="general", tags=["injury", "trade"]),
            make_article("https://x/3", hours_ago=2, category="injury", tags=["injury"]),
        ])
        news, _ = build_news(clock, provider)

        result = await news.get_by_category("Trade", limit=10)

        assert [a.url for a in result.items] == ["https://x/1", "https://x/2"]

    async def test_category_truncates_to_limit(self, clock):
        provider = FakeNewsProvider("p", [
            make_article(f"https://x/{i}", hours_ago=i, category="trade") for i in range(5)
        ])
        news, _ = build_news(clock, provider)

        result = await news.get_by_category("trade", limit=2)

        assert len(result.items) == 2


class TestScoreboard:
    async def test_filters_by_start_date(self, clock):
        provider = FakeScoresProvider("s", [
            make_score("today", hours_ago=1),
            make_score("yesterday", hours_ago=30),
        ])
        scores, _ = build_scores(clock, provider)

        board = await scores.get_scoreboard(day=date(2024, 3, 1))

        assert board.date == date(2024, 3, 1)
        assert [s.id for s in board.scores] == ["today"]

    async def test_always_reads_live_data(self, clock):
        provider = FakeScoresProvider("s", [make_score("today")])
        scores, _ = build_scores(clock, provider)

        await scores.get_scoreboard()
        board = await scores.get_scoreboard()

        assert provider.calls == 2
        assert board.date == BASE_TIME.date()
        assert [s.id for s in board.scores] == ["today"]

    async def test_busy_feed_does_not_crowd_out_requested_day(self, clock):
        busy = FakeScoresProvider("busy", [make_score(f"upcoming_{i}", hours_ago=-1) for i in range(120)])
        archive = FakeScoresProvider("archive", [make_score("past_1", hours_ago=48)])
        scores, _ = build_scores(clock, busy, archive)

        board = await scores.get_scoreboard(day=date(2024, 2, 28), limit=100)

        assert [s.id for s in board.scores] == ["past_1"]

    async def test_limit_applies_after_date_filter(self, clock):
        provider = FakeScoresProvider("s", [
            make_score(f"other_{i}", hours_ago=-1) for i in range(10)
        ] + [
            make_score(f"day_{i}", hours_ago=24 + i) for i in range(5)
        ])
        scores, _ = build_scores(clock, provider)

        board = await scores.get_scoreboard(day=date(2024, 2, 29), limit=2)

        assert [s.id for s in board.scores] == ["day_0", "day_1"]

    async def test_outage_serves_sample_scores_for_the_day(self, clock):
        scores, _ = build_scores(clock, FakeScoresProvider("s", error=UpstreamHTTPError("s", 502)))

        board = await scores.get_scoreboard(day=BASE_TIME.date())

        assert "sample_score_1" in [s.id for s in board.scores]
        assert all(s.start_time.date() == BASE_TIME.date() for s in board.scores)


@pytest.mark.parametrize("sport", list(SportId))
async def test_fallback_news_respects_sport(clock, sport):
    news, _ = build_news(clock)
    result = await news.get_latest(sport, limit=10)
    assert result.items
    assert all(a.sport_id == sport for a in result.items)

"""Tests for ForumsClient: Reddit/Quora mapping and transition stories."""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from core.cache import CacheTTL
from core.config_loader import ForumsProviderConfig
from core.providers import (
    ForumPost,
    ForumsClient,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTransportError,
)
from tests.mocks.provider_mocks import raw_quora_answer, raw_quora_question, raw_reddit_post

CONFIG = ForumsProviderConfig()


def make_gateway(routes):
    """Gateway whose request() answers by endpoint; exception values are raised."""
    async def request(endpoint, **kwargs):
        result = routes[endpoint]
        if callable(result):
            result = result(kwargs["params"])
        if isinstance(result, Exception):
            raise result
        return result

    gateway = Mock()
    gateway.service_name = "ForumsAPI"
    gateway.request = AsyncMock(side_effect=request)
    return gateway


def story(title, content, upvotes=0, platform="reddit"):
    return ForumPost(platform=platform, title=title, content=content, upvotes=upvotes)


class TestRedditSearch:

    def test_01_maps_posts_and_skips_nsfw_and_empty(self):
        payload = {"data": [
            raw_reddit_post("p1", score=42),
            raw_reddit_post("p2", isOver18=True),
            raw_reddit_post("p3", content="   "),
            raw_reddit_post("p4", content=None),
        ]}
        gateway = make_gateway({CONFIG.reddit_search_url: payload})
        client = ForumsClient(gateway, "key")

        posts = asyncio.run(client.search_reddit_posts("career change", limit=5))

        assert len(posts) == 1
        post = posts[0]
        assert post.platform == "reddit"
        assert post.source == "reddit"
        assert post.upvotes == 42
        assert post.date == "2024-05-01"
        assert post.url == "https://reddit.com/r/careerguidance/p1"

        kwargs = gateway.request.call_args.kwargs
        assert kwargs["params"] == {"query": "career change", "sort": "RELEVANCE", "time": "all", "limit": 5}
        assert kwargs["ttl_seconds"] == CacheTTL.LONG
        assert kwargs["headers"]["X-RapidAPI-Host"] == CONFIG.reddit_host

    def test_02_failure_degrades_to_empty(self):
        gateway = make_gateway({CONFIG.reddit_search_url: ProviderTransportError("ForumsAPI", "/search", "down")})
        assert asyncio.run(ForumsClient(gateway, "key").search_reddit_posts("x")) == []

    def test_03_invalid_envelope_gives_empty(self):
        gateway = make_gateway({CONFIG.reddit_search_url: {"posts": []}})
        assert asyncio.run(ForumsClient(gateway, "key").search_reddit_posts("x")) == []


class TestQuora:

    def test_01_questions_without_answers_are_dropped(self):
        payload = {"data": [
            raw_quora_question("q1", num_answers=3),
            raw_quora_question("q2", num_answers=0),
            {"id": "q3", "title": "No url", "numAnswers": 4},
        ]}
        gateway = make_gateway({CONFIG.quora_search_url: payload})

        questions = asyncio.run(ForumsClient(gateway, "key").search_quora_questions("transition"))

        assert [q.id for q in questions] == ["q1"]
        assert gateway.request.call_args.kwargs["params"]["time"] == "all_times"

    def test_02_answers_sorted_by_upvotes(self):
        payload = {"data": [
            raw_quora_answer("a1", upvotes=3),
            raw_quora_answer("a2", upvotes=30),
            raw_quora_answer("a3", upvotes=12),
        ]}
        gateway = make_gateway({CONFIG.quora_answers_url: payload})

        answers = asyncio.run(ForumsClient(gateway, "key").get_quora_answers("https://www.quora.com/q1"))

        assert [a.id for a in answers] == ["a2", "a3", "a1"]
        assert answers[0].author == "author-a2"

    def test_03_answer_lookup_errors_propagate(self):
        gateway = make_gateway({CONFIG.quora_answers_url: ProviderRateLimitError("ForumsAPI", "/answers", "slow")})
        with pytest.raises(ProviderRateLimitError):
            asyncio.run(ForumsClient(gateway, "key").get_quora_answers("https://www.quora.com/q1"))

    def test_04_invalid_answer_envelope_raises(self):
        gateway = make_gateway({CONFIG.quora_answers_url: {"answers": "nope"}})
        with pytest.raises(ProviderResponseError):
            asyncio.run(ForumsClient(gateway, "key").get_quora_answers("https://www.quora.com/q1"))


class TestTransitionStories:

    def _answers_by_question(self, params):
        question_id = params["url"].rsplit("/", 1)[-1]
        if question_id == "q2":
            return ProviderTransportError("ForumsAPI", "/answers", "timeout")
        upvotes = int(question_id[1:]) * 10
        return {"data": [raw_quora_answer(f"{question_id}-top", upvotes=upvotes)]}

    def test_01_merges_platforms_sorted_by_upvotes(self):
        routes = {
            CONFIG.reddit_search_url: {"data": [raw_reddit_post("p1", score=25), raw_reddit_post("p2", score=5)]},
            CONFIG.quora_search_url: {"data": [raw_quora_question(f"q{i}") for i in range(1, 8)]},
            CONFIG.quora_answers_url: self._answers_by_question,
        }
        gateway = make_gateway(routes)
        client = ForumsClient(gateway, "key")

        stories = asyncio.run(client.search_transition_stories("Teacher", "Data Analyst"))

        # q1..q5 get answers, q2 fails and is skipped, q6/q7 are never asked
        upvotes = [s.upvotes for s in stories]
        assert upvotes == sorted(upvotes, reverse=True)
        assert [s.upvotes for s in stories if s.platform == "quora"] == [50, 40, 30, 10]
        assert len([s for s in stories if s.platform == "reddit"]) == 2
        answer_calls = [c for c in gateway.request.call_args_list if c.args[0] == CONFIG.quora_answers_url]
        assert len(answer_calls) == 5

        queries = {c.args[0]: c.kwargs["params"].get("query") for c in gateway.request.call_args_list}
        assert queries[CONFIG.reddit_search_url] == "career change Teacher to Data Analyst"
        assert queries[CONFIG.quora_search_url] == "career transition Teacher to Data Analyst"

    def test_02_missing_api_key_gives_no_stories(self):
        gateway = make_gateway({})
        stories = asyncio.run(ForumsClient(gateway, "").search_transition_stories("Teacher", "Data Analyst"))

        assert stories == []
        gateway.request.assert_not_called()


class TestChallengeCounting:

    def test_01_counts_once_per_story_per_label(self):
        stories = [
            story("Interview prep", "So many interviews, and my portfolio was thin."),
            story("Impostor feelings", "Imposter syndrome hit hard; I was an impostor."),
            story("Skills", "Learning new skills took time."),
        ]

        frequencies = ForumsClient.count_challenges(stories)
        counts = {f.challenge: f.frequency for f in frequencies}

        assert counts["Technical interview preparation"] == 1
        assert counts["Building a strong portfolio"] == 1
        assert counts["Impostor syndrome"] == 1
        assert counts["Acquiring necessary skills"] == 1
        assert counts["Finding time to prepare"] == 1

    def test_02_matches_word_starts_only(self):
        frequencies = ForumsClient.count_challenges([story("Managing", "I manage a team of engineers.")])
        assert "Age-related concerns" not in {f.challenge for f in frequencies}

    def test_03_sorted_by_frequency_then_name(self):
        stories = [
            story("a", "salary talk"),
            story("b", "salary again and rejection"),
            story("c", "rejection"),
            story("d", "bias"),
        ]

        frequencies = ForumsClient.count_challenges(stories)

        assert [(f.challenge, f.frequency) for f in frequencies] == [
            ("Handling rejection", 2),
            ("Salary negotiation", 2),
            ("Dealing with bias", 1),
        ]

    def test_04_analyze_transition_challenges(self):
        routes = {
            CONFIG.reddit_search_url: {"data": [raw_reddit_post("p1", content="Networking got me my first interview.")]},
            CONFIG.quora_search_url: {"data": []},
        }
        client = ForumsClient(make_gateway(routes), "key")

        frequencies = asyncio.run(client.analyze_transition_challenges("Teacher", "Data Analyst"))

        challenges = {f.challenge for f in frequencies}
        assert "Professional networking" in challenges
        assert "Technical interview preparation" in challenges

"""Forum discussion client (Reddit and Quora on RapidAPI)."""
import asyncio
import logging
import re
from collections import Counter
from typing import Any, List, Optional

from pydantic import ValidationError

from core.cache import CacheTTL
from core.config_loader import ForumsProviderConfig
from core.providers.base import BaseProviderClient, parse_timestamp
from core.providers.errors import ProviderError, ProviderResponseError
from core.providers.gateway import CachedRequestGateway
from core.providers.models import ChallengeFrequency, ForumPost, QuoraAnswer, QuoraQuestion

logger = logging.getLogger(__name__)

QUORA_QUESTIONS_WITH_ANSWERS = 5

# keyword -> challenge label; matched at word starts so "skills" counts for "skill"
CHALLENGE_KEYWORDS = [
    ("interview", "Technical interview preparation"),
    ("portfolio", "Building a strong portfolio"),
    ("experience", "Getting relevant experience"),
    ("skill", "Acquiring necessary skills"),
    ("impostor", "Impostor syndrome"),
    ("imposter", "Impostor syndrome"),
    ("confidence", "Building confidence"),
    ("salary", "Salary negotiation"),
    ("networking", "Professional networking"),
    ("time", "Finding time to prepare"),
    ("rejection", "Handling rejection"),
    ("gap", "Addressing skill gaps"),
    ("certification", "Getting certifications"),
    ("age", "Age-related concerns"),
    ("bias", "Dealing with bias"),
]


def _format_date(value: Any) -> Optional[str]:
    parsed = parse_timestamp(value)
    return parsed.date().isoformat() if parsed else None


class ForumsClient(BaseProviderClient):
    """Career transition stories from Reddit posts and Quora answers."""

    def __init__(
        self,
        gateway: CachedRequestGateway,
        api_key: Optional[str],
        config: Optional[ForumsProviderConfig] = None
    ):
        super().__init__(gateway, api_key)
        self.config = config or ForumsProviderConfig()

    async def search_reddit_posts(self, query: str, limit: int = 10) -> List[ForumPost]:
        params = {"query": query, "sort": "RELEVANCE", "time": "all", "limit": limit}
        try:
            payload = await self._get(
                self.config.reddit_search_url, self.config.reddit_host, params, CacheTTL.LONG
            )
        except ProviderError as e:
            logger.warning(f"Reddit search failed for '{query}': {e}")
            return []

        posts = []
        for raw in self._data_list(payload):
            # NSFW and body-less posts carry nothing to scan
            if not isinstance(raw, dict) or raw.get("isOver18"):
                continue
            content = raw.get("content")
            if not isinstance(content, str) or not content.strip():
                continue
            try:
                posts.append(ForumPost(
                    platform="reddit",
                    title=raw.get("title") or "",
                    content=content,
                    url=raw.get("url"),
                    author=raw.get("author"),
                    date=_format_date(raw.get("created")),
                    upvotes=raw.get("score") or 0,
                ))
            except ValidationError as e:
                logger.debug(f"Dropping malformed Reddit post {raw.get('id')}: {e}")

        logger.info(f"[{self.service_name}] Found {len(posts)} Reddit posts for query: {query}")
        return posts[:limit]

    async def search_quora_questions(self, query: str, limit: int = 10) -> List[QuoraQuestion]:
        params = {"query": query, "language": "en", "time": "all_times", "limit": limit}
        try:
            payload = await self._get(
                self.config.quora_search_url, self.config.quora_host, params, CacheTTL.LONG
            )
        except ProviderError as e:
            logger.warning(f"Quora search failed for '{query}': {e}")
            return []

        questions = []
        for raw in self._data_list(payload):
            if not isinstance(raw, dict):
                continue
            try:
                question = QuoraQuestion(
                    id=str(raw.get("id") or ""),
                    title=raw.get("title") or "",
                    url=raw.get("url") or "",
                    num_answers=raw.get("numAnswers") or 0,
                    created=raw.get("created"),
                )
            except ValidationError as e:
                logger.debug(f"Dropping malformed Quora question {raw.get('id')}: {e}")
                continue
            if question.num_answers > 0 and question.url:
                questions.append(question)

        logger.info(f"[{self.service_name}] Found {len(questions)} answered Quora questions for query: {query}")
        return questions[:limit]

    async def get_quora_answers(self, question_url: str, limit: int = 5) -> List[QuoraAnswer]:
        """Answers for one question, most upvoted first. Errors propagate."""
        params = {"url": question_url, "sort": "ranking_toggle_upvote", "limit": limit}
        payload = await self._get(
            self.config.quora_answers_url, self.config.quora_host, params, CacheTTL.LONG
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise ProviderResponseError(
                self.service_name, self.config.quora_answers_url, "Invalid answers payload"
            )

        answers = []
        for raw in payload["data"]:
            if not isinstance(raw, dict):
                continue
            author = raw.get("author")
            try:
                answers.append(QuoraAnswer(
                    id=str(raw.get("id") or ""),
                    content=raw.get("content") or "",
                    url=raw.get("url"),
                    author=author.get("name") if isinstance(author, dict) else author,
                    upvotes=raw.get("upvotes") or 0,
                    created=raw.get("created"),
                ))
            except ValidationError as e:
                logger.debug(f"Dropping malformed Quora answer {raw.get('id')}: {e}")

        answers.sort(key=lambda a: a.upvotes, reverse=True)
        return answers[:limit]

    async def search_transition_stories(
        self,
        current_role: str,
        target_role: str,
        limit: int = 10
    ) -> List[ForumPost]:
        """Reddit posts plus top Quora answers for the transition, most upvoted first."""
        reddit_posts, questions = await asyncio.gather(
            self.search_reddit_posts(f"career change {current_role} to {target_role}", limit),
            self.search_quora_questions(f"career transition {current_role} to {target_role}", limit),
        )

        quora_stories = await asyncio.gather(
            *(self._top_answer_story(q) for q in questions[:QUORA_QUESTIONS_WITH_ANSWERS])
        )

        stories = reddit_posts + [s for s in quora_stories if s is not None]
        stories.sort(key=lambda s: s.upvotes, reverse=True)
        return stories

    async def analyze_transition_challenges(
        self,
        current_role: str,
        target_role: str
    ) -> List[ChallengeFrequency]:
        stories = await self.search_transition_stories(current_role, target_role, 20)
        return self.count_challenges(stories)

    @staticmethod
    def count_challenges(stories: List[ForumPost]) -> List[ChallengeFrequency]:
        """Count stories mentioning each challenge keyword, most frequent first."""
        counts: Counter = Counter()
        for story in stories:
            text = f"{story.title}\n{story.content}".lower()
            # A story counts at most once per challenge label
            matched = {
                challenge for keyword, challenge in CHALLENGE_KEYWORDS
                if re.search(rf"\b{keyword}", text)
            }
            counts.update(matched)

        return [
            ChallengeFrequency(challenge=challenge, frequency=frequency)
            for challenge, frequency in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        ]

    async def _top_answer_story(self, question: QuoraQuestion) -> Optional[ForumPost]:
        try:
            answers = await self.get_quora_answers(question.url, 3)
        except ProviderError as e:
            logger.warning(f"Failed to get answers for Quora question {question.url}: {e}")
            return None

        if not answers:
            return None

        top = answers[0]
        return ForumPost(
            platform="quora",
            title=question.title,
            content=top.content,
            url=top.url,
            author=top.author,
            date=_format_date(top.created),
            upvotes=top.upvotes,
        )

    def _data_list(self, payload: Any) -> List[Any]:
        if isinstance(payload, dict) and isinstance(payload.get("data"), list):
            return payload["data"]
        logger.warning(f"[{self.service_name}] Invalid results format, expected a 'data' list")
        return []

"""
Insight Generator

One Claude call per artifact. Each method builds the prompt, sends it and
returns the parsed JSON object exactly as the model produced it; shaping it
into typed records is the normalizer's job.

Any failure (API error, timeout, empty output, non-JSON, JSON that is not an
object) raises GenerationFailed.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

from marketscope.analysis.errors import GenerationFailed
from marketscope.output.schemas import SEOMetrics
from marketscope.utils.config import Settings, get_settings
from . import prompts
from .client import ClaudeClient

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def extract_json(text: str, allow_list: bool = False) -> Union[Dict[str, Any], List[Any]]:
    """
    Pull the JSON payload out of a model response.

    Tries, in order: the whole text, the first fenced block, then the span
    from the first opening brace to the last closing brace.

    Raises:
        ValueError: no parseable JSON object (or list, when allowed)
    """
    if not text or not text.strip():
        raise ValueError("Empty response")

    candidates = [text.strip()]

    fenced = _FENCE_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1))

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    if allow_list:
        start, end = text.find("["), text.rfind("]")
        if start != -1 and end > start:
            candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) or (allow_list and isinstance(data, list)):
            return data

    raise ValueError("No JSON object found in response")


class InsightGenerator:
    """
    AI collaborator for the analysis pipeline.

    Usage:
        generator = InsightGenerator()
        raw = await generator.analyze_landscape(company, competitors)
    """

    def __init__(
        self,
        client: Optional[ClaudeClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._client = client
        self._settings = settings or get_settings()

    @property
    def client(self) -> ClaudeClient:
        if self._client is None:
            try:
                self._client = ClaudeClient(
                    api_key=self._settings.ANTHROPIC_API_KEY,
                    model=self._settings.CLAUDE_MODEL,
                    timeout=self._settings.GENERATION_TIMEOUT,
                )
            except ValueError as e:
                raise GenerationFailed(f"AI provider not configured: {e}")
        return self._client

    # =========================================================================
    # CALL HELPERS
    # =========================================================================

    async def _complete(self, task: str, prompt: str, system: str, max_tokens: int) -> str:
        response = await self.client.analyze(prompt=prompt, system=system, max_tokens=max_tokens)
        if not response.success:
            logger.error(f"{task} generation failed: {response.error}")
            raise GenerationFailed(f"Failed to generate {task}: {response.error}")
        if not response.content.strip():
            logger.error(f"{task} generation returned empty output")
            raise GenerationFailed(f"Failed to generate {task}: empty response")
        return response.content

    async def _complete_json(
        self,
        task: str,
        prompt: str,
        system: str,
        max_tokens: int = 4000,
        allow_list: bool = False,
    ) -> Union[Dict[str, Any], List[Any]]:
        text = await self._complete(task, prompt, system, max_tokens)
        try:
            return extract_json(text, allow_list=allow_list)
        except ValueError as e:
            logger.error(f"{task} response was not usable JSON: {e}; head={text[:200]!r}")
            raise GenerationFailed(f"Failed to generate {task}: response was not valid JSON")

    # =========================================================================
    # ANALYSES
    # =========================================================================

    async def analyze_competitor(
        self,
        name: str,
        website: str,
        metrics: SEOMetrics,
        company: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Narrative insights for one competitor from its SEO metrics."""
        prompt = prompts.COMPETITOR_TEMPLATE.format(
            name=name,
            website=website,
            domain_authority=metrics.domain_authority,
            page_authority=metrics.page_authority,
            spam_score=metrics.spam_score,
            linking_domains=metrics.linking_domains,
            total_links=metrics.total_links,
            seo_strength=metrics.seo_strength,
            degraded_note=(
                "- Note: live SEO metrics were unavailable; the values above are placeholders.\n"
                if metrics.degraded else ""
            ),
            company_block=prompts.company_block(company),
            company_suffix=" and company context" if company else "",
        )
        return await self._complete_json("competitor analysis", prompt, prompts.COMPETITOR_SYSTEM, 2000)

    async def analyze_landscape(
        self,
        company: Dict[str, Any],
        competitors: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Company-vs-all-competitors report."""
        prompt = prompts.LANDSCAPE_TEMPLATE.format(
            company=prompts.to_json_block(company),
            competitor_count=len(competitors),
            competitors=prompts.to_json_block(competitors),
        )
        return await self._complete_json("landscape analysis", prompt, prompts.LANDSCAPE_SYSTEM, 6000)

    async def analyze_positioning(
        self,
        company: Dict[str, Any],
        competitors: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        prompt = prompts.POSITIONING_TEMPLATE.format(
            company=prompts.to_json_block(company),
            competitors=prompts.to_json_block(competitors),
        )
        return await self._complete_json("positioning analysis", prompt, prompts.POSITIONING_SYSTEM, 4000)

    # =========================================================================
    # CONTENT
    # =========================================================================

    async def blog_ideas(
        self,
        company: Dict[str, Any],
        competitors: List[Dict[str, Any]],
        positioning: List[Dict[str, Any]],
        rejected: List[Dict[str, Any]],
        count: Optional[int] = None,
    ) -> Union[Dict[str, Any], List[Any]]:
        """
        Blog post ideas. rejected holds {"title", "reason"} pairs the model
        is told to steer away from.
        """
        prompt = prompts.BLOG_IDEAS_TEMPLATE.format(
            company=prompts.to_json_block(company),
            competitors=prompts.to_json_block(competitors),
            positioning=prompts.to_json_block(positioning),
            rejected=prompts.rejected_block(rejected),
            count=count or self._settings.BLOG_IDEA_COUNT,
        )
        return await self._complete_json(
            "blog ideas", prompt, prompts.BLOG_IDEAS_SYSTEM, 4000, allow_list=True
        )

    async def full_article(
        self,
        idea: Dict[str, Any],
        company: Dict[str, Any],
        competitors: List[Dict[str, Any]],
        positioning: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        prompt = prompts.ARTICLE_TEMPLATE.format(
            idea=prompts.to_json_block(idea),
            company=prompts.to_json_block(company),
            competitors=prompts.to_json_block(competitors),
            positioning=prompts.to_json_block(positioning),
        )
        return await self._complete_json("article", prompt, prompts.ARTICLE_SYSTEM, 8000)

    async def generate_content(
        self,
        topic: str,
        content_type: str,
        keywords: str = "",
        tone: str = "professional",
        word_count: str = "500",
        additional_instructions: Optional[str] = None,
        company: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Free-form marketing copy. Returns plain text, not JSON."""
        prompt = prompts.CONTENT_TEMPLATE.format(
            content_type=content_type,
            topic=topic,
            keywords=keywords or "None",
            tone=tone,
            word_count=word_count,
            additional_instructions=additional_instructions or "None",
            company_block=prompts.company_block(company),
        )
        text = await self._complete("content", prompt, prompts.CONTENT_SYSTEM, 4000)
        return text.strip()

    async def generate_content_strategy(
        self,
        description: str,
        target_audience: str,
        industry: str,
    ) -> Dict[str, Any]:
        prompt = prompts.STRATEGY_TEMPLATE.format(
            description=description or "Not specified",
            target_audience=target_audience or "Not specified",
            industry=industry or "Not specified",
        )
        return await self._complete_json("content strategy", prompt, prompts.STRATEGY_SYSTEM, 3000)

"""
Listing Optimization Service
Four independent OpenAI chat completions (title, bullets, description,
keywords) issued concurrently and joined all-or-nothing
"""
import asyncio
import logging
from typing import List, Optional

from openai import AsyncOpenAI

from ..config import (
    FALLBACK_LIST_LIMIT,
    KEYWORD_CONTEXT_DESCRIPTION_CHARS,
    NO_BULLETS_PLACEHOLDER,
    OPENAI_MAX_TOKENS,
    OPENAI_TEMPERATURE,
)
from ..errors import OptimizationFailed
from ..models import OptimizedListing, ProductListing
from ..utils.parsing import parse_list_response
from ..utils.sanitizers import clean_model_text

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an Amazon listing optimization expert. Follow the output format "
    "instructions exactly and never add commentary."
)

TITLE_PROMPT = """You are an Amazon listing optimization expert specializing in SEO and conversion optimization.

Original Amazon product title:
"{title}"

Your task: Generate an improved product title that:
- Is keyword-rich but natural and readable
- Stays under 200 characters
- Includes primary benefits and key features
- Follows Amazon's title guidelines (no promotional language, proper capitalization)
- Optimizes for search visibility while maintaining customer appeal

Return ONLY the optimized title, nothing else."""

BULLETS_PROMPT = """You are an Amazon listing optimization expert specializing in persuasive copywriting.

Original Amazon bullet points:
{bullets}

Your task: Rewrite these bullet points to be more effective by:
- Leading with benefits, not just features
- Being clear, concise, and scannable
- Using power words and action verbs
- Keeping each bullet under 250 characters
- Maintaining factual accuracy
- Following Amazon's guidelines (no promotional claims like "best" or "perfect")

Return the result as a JSON array of strings, with 5 bullet points.
Format: ["bullet 1", "bullet 2", "bullet 3", "bullet 4", "bullet 5"]

Return ONLY the JSON array, nothing else."""

DESCRIPTION_PROMPT = """You are an Amazon listing optimization expert specializing in persuasive product descriptions.

Product Title: {title}

Original Description:
{description}

Your task: Enhance this Amazon product description to be:
- More persuasive and engaging
- Better formatted with clear paragraphs
- Benefit-focused (explain how it improves customer's life)
- Compliant with Amazon policies (no promotional language, external links, or seller information)
- Around 250-300 words

Return ONLY the enhanced description, nothing else."""

KEYWORDS_PROMPT = """You are an Amazon SEO expert specializing in keyword research.

Based on this product listing:
Title: {title}
Bullets: {bullets}
Description: {description}...

Your task: Suggest 3-5 high-intent keywords that:
- Aren't already heavily used in the current listing
- Have strong commercial search intent (customers ready to buy)
- Are relevant to the product category
- Could improve search visibility
- Are actual search terms customers use (not just features)

Return the result as a JSON array of strings.
Format: ["keyword 1", "keyword 2", "keyword 3"]

Return ONLY the JSON array, nothing else."""


def build_client(api_key: str, base_url: str = "", timeout: float = 60.0) -> Optional[AsyncOpenAI]:
    """
    Build the AsyncOpenAI client, or None when no key is configured
    Retries are disabled: a failed call fails the optimization.
    """
    if not api_key:
        logger.warning("OPENAI_API_KEY not set - listing optimization will fail")
        return None
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url or None,
        timeout=timeout,
        max_retries=0,
    )


class ListingOptimizer:
    """Rewrites a ProductListing with a generative text model"""

    def __init__(self, client: Optional[AsyncOpenAI], model: str = "gpt-4o-mini"):
        self.client = client
        self.model = model

    async def _complete(self, prompt: str, label: str, request_id: str) -> str:
        if self.client is None:
            raise OptimizationFailed("OpenAI client not initialized - check OPENAI_API_KEY")

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=OPENAI_TEMPERATURE,
            max_tokens=OPENAI_MAX_TOKENS,
        )

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise OptimizationFailed(f"Model returned empty response for {label}")
        return content.strip()

    async def optimize_title(self, title: str, request_id: str = "unknown") -> str:
        logger.info(f"[{request_id}] AI: Optimizing title")
        text = await self._complete(TITLE_PROMPT.format(title=title), "title", request_id)
        logger.info(f"[{request_id}] AI: Title optimization complete")
        return clean_model_text(text)

    async def optimize_bullets(self, bullets: List[str], request_id: str = "unknown") -> List[str]:
        logger.info(f"[{request_id}] AI: Optimizing bullet points")
        if not bullets:
            logger.info(f"[{request_id}] AI: No bullets to optimize, using placeholder")
            return list(NO_BULLETS_PLACEHOLDER)

        numbered = "\n".join(f"{i}. {bullet}" for i, bullet in enumerate(bullets, start=1))
        text = await self._complete(BULLETS_PROMPT.format(bullets=numbered), "bullets", request_id)
        optimized = parse_list_response(text, FALLBACK_LIST_LIMIT)
        logger.info(f"[{request_id}] AI: Bullet points optimization complete ({len(optimized)} bullets)")
        return optimized

    async def optimize_description(self, description: str, title: str, request_id: str = "unknown") -> str:
        logger.info(f"[{request_id}] AI: Optimizing description")
        prompt = DESCRIPTION_PROMPT.format(title=title, description=description)
        text = await self._complete(prompt, "description", request_id)
        logger.info(f"[{request_id}] AI: Description optimization complete")
        return clean_model_text(text)

    async def suggest_keywords(
        self, title: str, bullets: List[str], description: str, request_id: str = "unknown"
    ) -> List[str]:
        logger.info(f"[{request_id}] AI: Generating keyword suggestions")
        prompt = KEYWORDS_PROMPT.format(
            title=title,
            bullets=", ".join(bullets),
            description=description[:KEYWORD_CONTEXT_DESCRIPTION_CHARS],
        )
        text = await self._complete(prompt, "keywords", request_id)
        keywords = parse_list_response(text, FALLBACK_LIST_LIMIT)
        logger.info(f"[{request_id}] AI: Keyword suggestions complete ({len(keywords)} keywords)")
        return keywords

    async def optimize(self, listing: ProductListing, request_id: str = "unknown") -> OptimizedListing:
        """
        Run the four generation calls concurrently
        Args:
            listing: Scraped listing
            request_id: Correlation id for log lines
        Returns:
            OptimizedListing
        Raises:
            OptimizationFailed: If any of the four calls fails
        """
        logger.info(f"[{request_id}] Starting parallel AI optimization (4 tasks)")
        try:
            title, bullets, description, keywords = await asyncio.gather(
                self.optimize_title(listing.title, request_id),
                self.optimize_bullets(listing.bullets, request_id),
                self.optimize_description(listing.description, listing.title, request_id),
                self.suggest_keywords(listing.title, listing.bullets, listing.description, request_id),
            )
        except OptimizationFailed as e:
            logger.error(f"[{request_id}] AI optimization error: {e}")
            raise
        except Exception as e:
            logger.error(f"[{request_id}] AI optimization error: {e}", exc_info=True)
            raise OptimizationFailed(f"Failed to optimize product listing with AI: {e}") from e

        logger.info(f"[{request_id}] AI optimization completed successfully")
        return OptimizedListing(title=title, bullets=bullets, description=description, keywords=keywords)

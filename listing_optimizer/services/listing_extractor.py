"""
Listing Extractor Service
Landmark-based extraction of title, bullet points and description

Product pages drift, so sections are located by their visible heading text
rather than by fixed ids: find the heading ("landmark"), then look a bounded
number of siblings ahead for the content it introduces. Any stage may match
nothing; only a missing title is an error.
"""
import logging
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Comment, Tag

from ..config import (
    BULLETS_LANDMARK,
    DESCRIPTION_LANDMARK,
    LANDMARK_MAX_SIBLING_DISTANCE,
    NO_DESCRIPTION_PLACEHOLDER,
    TITLE_SELECTORS,
)
from ..errors import ProductNotFound
from ..models import ProductListing
from ..utils.sanitizers import normalize_text

logger = logging.getLogger(__name__)


def _matches_landmark(text: str, landmark: str) -> bool:
    return normalize_text(text).lower() == landmark.lower()


def find_landmarks(soup: BeautifulSoup, landmark: str) -> Iterator[Tag]:
    """
    Phase 1: elements whose whole visible text is the landmark
    Yields innermost first, then each ancestor that still reads exactly the
    landmark (e.g. <span> then its <h3>), so phase 2 can try every level.
    """
    def is_landmark_text(s) -> bool:
        if isinstance(s, Comment) or not isinstance(s, str):
            return False
        return _matches_landmark(s, landmark)

    seen = set()
    for string in soup.find_all(string=is_landmark_text):
        node = string.parent
        while isinstance(node, Tag) and node.name not in ("body", "html", "[document]"):
            if not _matches_landmark(node.get_text(" ", strip=True), landmark):
                break
            if id(node) not in seen:
                seen.add(id(node))
                yield node
            node = node.parent


def iter_after_landmark(
    landmark: Tag,
    names: tuple,
    max_distance: int = LANDMARK_MAX_SIBLING_DISTANCE,
) -> Iterator[Tag]:
    """
    Phase 2: tags named ``names`` among the next ``max_distance`` element siblings
    A sibling matches itself or through its first matching descendant.
    """
    for distance, sibling in enumerate(landmark.find_next_siblings(True)):
        if distance >= max_distance:
            break
        if sibling.name in names:
            yield sibling
            continue
        nested = sibling.find(list(names))
        if nested is not None:
            yield nested


def find_after_landmark(
    landmark: Tag,
    names: tuple,
    max_distance: int = LANDMARK_MAX_SIBLING_DISTANCE,
) -> Optional[Tag]:
    return next(iter_after_landmark(landmark, names, max_distance), None)


class ListingExtractor:
    """Parses product page HTML into a ProductListing"""

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def extract(self, html: str, request_id: str = "unknown") -> ProductListing:
        """
        Extract the listing triplet
        Args:
            html: Raw product page markup
            request_id: Correlation id for log lines
        Returns:
            ProductListing with possibly empty bullets
        Raises:
            ProductNotFound: No title element on the page
        """
        soup = BeautifulSoup(html or "", self.parser)

        title = self.extract_title(soup)
        if not title:
            logger.error(f"[{request_id}] Product not found - title element missing")
            raise ProductNotFound("Product not found")

        logger.info(f"[{request_id}] Extracting product data (title: {title[:50]}...)")
        bullets = self.extract_bullets(soup)
        description = self.extract_description(soup, bullets)

        logger.info(
            f"[{request_id}] Successfully scraped product: {len(bullets)} bullets, "
            f"{len(description)} chars description"
        )
        return ProductListing(title=title, bullets=bullets, description=description)

    def extract_title(self, soup: BeautifulSoup) -> str:
        for selector in TITLE_SELECTORS:
            elem = soup.select_one(selector)
            if elem:
                title = normalize_text(elem.get_text(" ", strip=True))
                if title:
                    return title
        return ""

    def extract_bullets(self, soup: BeautifulSoup) -> List[str]:
        for landmark in find_landmarks(soup, BULLETS_LANDMARK):
            bullet_list = find_after_landmark(landmark, ("ul", "ol"))
            if bullet_list is None:
                continue

            items = bullet_list.select("li span.a-list-item") or bullet_list.find_all("li")
            bullets = [normalize_text(item.get_text(" ", strip=True)) for item in items]
            bullets = [b for b in bullets if b]
            if bullets:
                return bullets
        return []

    def extract_description(self, soup: BeautifulSoup, bullets: List[str]) -> str:
        for landmark in find_landmarks(soup, DESCRIPTION_LANDMARK):
            for candidate in iter_after_landmark(landmark, ("p", "div")):
                text = normalize_text(candidate.get_text(" ", strip=True))
                if text:
                    return text

        if bullets:
            return " ".join(bullets)
        return NO_DESCRIPTION_PLACEHOLDER

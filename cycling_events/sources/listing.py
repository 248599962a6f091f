"""Selector rules for pulling event fields out of HTML listing pages.

Source markup is not stable, so every field is described by an ordered list
of CSS selectors. The first selector that yields non-empty text (or a
non-empty attribute) wins; later selectors are only consulted when earlier
ones find nothing.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag


@dataclass(frozen=True)
class FieldRule:
    """Ordered candidate selectors for one field of a listing fragment."""

    selectors: tuple[str, ...]
    attribute: str | None = None

    def extract(self, fragment: Tag) -> str:
        """Returns the first non-empty value found, or an empty string."""
        for selector in self.selectors:
            for element in fragment.select(selector):
                value = self._read(element)
                if value:
                    return value
        return ""

    def _read(self, element: Tag) -> str:
        if self.attribute is None:
            return element.get_text(" ", strip=True)
        value = element.get(self.attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip() if value else ""


@dataclass(frozen=True)
class ListingLayout:
    """Where the repeated event fragments are and how to read each field.

    Attributes:
        fragments: Candidate selectors for the repeated listing element. The
            first one that matches anything is used for the whole page.
        fields: Field name to extraction rule.
    """

    fragments: tuple[str, ...]
    fields: Mapping[str, FieldRule]

    def select_fragments(self, soup: Tag) -> list[Tag]:
        for selector in self.fragments:
            found = soup.select(selector)
            if found:
                return found
        return []


def parse_listing(html_content: str, layout: ListingLayout) -> list[dict[str, str]]:
    """Extracts one raw record per listing fragment.

    Args:
        html_content: The HTML of the listing page.
        layout: Fragment and field selectors for the page.

    Returns:
        A list of {field: text} dicts, one per fragment, in document order.
        Fields that matched nothing are empty strings.
    """
    soup = BeautifulSoup(html_content, "lxml")
    return [
        {name: rule.extract(fragment) for name, rule in layout.fields.items()}
        for fragment in layout.select_fragments(soup)
    ]


# The first link in a fragment is the event page.
LINK = FieldRule(("a",), attribute="href")

"""
Sanitize rendered Wikivoyage section HTML for embedding.

- Drops script/style/noscript and page chrome (edit links, tables, thumbs)
- Strips on* event attributes and javascript:/vbscript:/data: URLs
- De-links edit and Special: links, absolutizes every other link and image
- Opens links in a new context with noopener/noreferrer
- Bounds the fragment: at most 6 images and 10 items per list by default

The transform is deterministic: the same markup and title always produce the
same bytes.
"""

import re
from urllib.parse import quote

from bs4 import BeautifulSoup

DEFAULT_HOME = "https://en.wikivoyage.org"
EDIT_LINK_RE = re.compile(r"action=edit|Special:|index\.php\?title=.*&action=edit", re.IGNORECASE)
REMOVED_SELECTORS = [".mw-editsection", ".noprint", "table", ".thumb", ".metadata"]

UNSAFE_URL_RE = re.compile(r"^(?:javascript|vbscript|data):", re.IGNORECASE)
_URL_NOISE_RE = re.compile(r"[\x00-\x20]+")

# characters left alone by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def absolutize(url: str, home: str = DEFAULT_HOME) -> str:
    """Resolve protocol-relative and site-relative URLs against `home`."""
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith("/"):
        return f"{home}{url}"
    return url


def _is_unsafe_url(url: str) -> bool:
    # browsers ignore embedded whitespace and control characters in the scheme
    return bool(UNSAFE_URL_RE.match(_URL_NOISE_RE.sub("", url)))


def _strip_active_content(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(True):
        for attr in [k for k in tag.attrs if k.lower().startswith("on")]:
            del tag[attr]
        for attr in ("href", "src"):
            value = tag.get(attr)
            if isinstance(value, str) and _is_unsafe_url(value):
                del tag[attr]


def _rewrite_anchors(soup: BeautifulSoup, title: str, home: str) -> None:
    for a in soup.find_all("a"):
        href = (a.get("href") or "").strip()
        if not href:
            if "href" in a.attrs:
                del a["href"]
            continue
        if EDIT_LINK_RE.search(href):
            a.replace_with(a.get_text())
            continue
        if href.startswith("#"):
            href = f"{home}/wiki/{quote(title, safe=_URI_COMPONENT_SAFE)}{href}"
        else:
            href = absolutize(href, home)
        a["href"] = href
        a["target"] = "_blank"
        a["rel"] = "noopener noreferrer"


def _bound_images(soup: BeautifulSoup, home: str, max_images: int) -> None:
    for idx, img in enumerate(soup.find_all("img")):
        if idx >= max_images:
            img.decompose()
            continue
        src = (img.get("src") or "").strip()
        if src:
            img["src"] = absolutize(src, home)
        img["loading"] = "lazy"


def _bound_lists(soup: BeautifulSoup, max_items: int) -> None:
    for lst in soup.find_all(["ul", "ol"]):
        # nested lists may already be gone with a trimmed parent item
        if lst.decomposed:
            continue
        for li in lst.find_all("li", recursive=False)[max_items:]:
            li.decompose()


def sanitize_section_html(
    html: str,
    title: str,
    *,
    home: str = DEFAULT_HOME,
    max_images: int = 6,
    max_list_items: int = 10,
) -> str:
    """Return a bounded, safe copy of `html`.

    Args:
        html: Raw rendered markup of one guide section
        title: Page title, used to resolve fragment-only links
        home: Guide site origin for site-relative URLs
        max_images: Images kept, in document order
        max_list_items: Direct `li` children kept per list

    Returns:
        Sanitized markup ("" for empty input)
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for node in soup.find_all(["script", "style", "noscript"]):
        node.decompose()

    _strip_active_content(soup)
    _rewrite_anchors(soup, title, home)

    for sel in REMOVED_SELECTORS:
        for node in soup.select(sel):
            if not node.decomposed:
                node.decompose()

    _bound_images(soup, home, max_images)
    _bound_lists(soup, max_list_items)

    return str(soup)

import logging
import re
from typing import Any, Dict, List

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markupsafe import Markup

from mdblog.errors import RenderError

logger = logging.getLogger(__name__)

PLAIN = "plain"
RICH = "rich"
PROFILES = (PLAIN, RICH)

DANGEROUS_SCHEMES = {"javascript", "vbscript", "file", "data"}
SAFE_DATA_IMAGE = re.compile(r"^data:image/(png|gif|jpe?g|webp);", re.IGNORECASE)
URL_SCHEME = re.compile(r"^([a-z][a-z0-9+.\-]*):", re.IGNORECASE)
IGNORED_URL_CHARS = re.compile(r"[\x00-\x20]")


def is_dangerous_url(url: str, allow_data_images: bool = False) -> bool:
    compact = IGNORED_URL_CHARS.sub("", url or "")
    match = URL_SCHEME.match(compact)
    if not match:
        return False
    scheme = match.group(1).lower()
    if scheme == "data" and allow_data_images and SAFE_DATA_IMAGE.match(compact):
        return False
    return scheme in DANGEROUS_SCHEMES


class UnsafeURLTreeprocessor(Treeprocessor):
    """Blank out link and image URLs that would execute script or read local files."""

    def run(self, root):
        for el in root.iter("a"):
            if is_dangerous_url(el.get("href", "")):
                el.set("href", "")
        for el in root.iter("img"):
            if is_dangerous_url(el.get("src", ""), allow_data_images=True):
                el.set("src", "")


class SafeHTMLExtension(Extension):
    """
    Escape raw HTML instead of passing it through, and drop unsafe URLs.
    Must be loaded after any extension that registers its own HTML handling.
    """

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        # Below "inline" (20) so links created by inline patterns are covered
        md.treeprocessors.register(UnsafeURLTreeprocessor(md), "unsafe_urls", 5)


def _extensions(profile: str) -> List[Any]:
    if profile == PLAIN:
        return [SafeHTMLExtension()]
    return [
        "tables",
        "toc",
        "pymdownx.tilde",
        "pymdownx.magiclink",
        "pymdownx.tasklist",
        "pymdownx.highlight",
        "pymdownx.superfences",
        SafeHTMLExtension(),
    ]


def _extension_configs(profile: str, code_style: str) -> Dict[str, Dict[str, Any]]:
    if profile == PLAIN:
        return {}
    return {
        "pymdownx.tilde": {"subscript": False},
        "pymdownx.highlight": {
            "use_pygments": True,
            "noclasses": True,
            "pygments_style": code_style,
            "pygments_lang_class": True,
            "guess_lang": False,
        },
    }


class MarkdownRenderer:
    """
    Converts a Markdown body to trusted HTML.

    ``plain`` is base Markdown and backs the index listing. ``rich`` adds the
    GitHub-flavored extensions, Pygments-highlighted code fences and heading
    ids, and backs the single-post page. A new converter is built for every
    call so no parser state leaks between renders.
    """

    def __init__(self, profile: str = RICH, code_style: str = "dracula"):
        if profile not in PROFILES:
            raise ValueError(f"Unknown rendering profile: {profile}")
        self.profile = profile
        self.code_style = code_style

    def _converter(self) -> markdown.Markdown:
        return markdown.Markdown(
            extensions=_extensions(self.profile),
            extension_configs=_extension_configs(self.profile, self.code_style),
            output_format="html",
        )

    def render(self, body: str) -> Markup:
        try:
            html = self._converter().convert(body)
        except Exception as e:
            logger.error(f"Markdown conversion failed ({self.profile}): {e}")
            raise RenderError(f"Failed to render markdown: {e}") from e
        return Markup(html)

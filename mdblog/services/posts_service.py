import logging
from pathlib import Path
from typing import List, NamedTuple, Optional, Tuple

from mdblog.errors import MalformedFrontMatterError, PostError, PostNotFoundError
from mdblog.schemas.blog import Post, PostMetadata
from mdblog.services.front_matter import (
    decode_metadata,
    parse_document,
    split_front_matter,
)
from mdblog.services.markdown_renderer import PLAIN, RICH, MarkdownRenderer

logger = logging.getLogger(__name__)


class PostFailure(NamedTuple):
    path: Path
    error: PostError


class PostsService:
    def __init__(
        self,
        repo,
        post_renderer: Optional[MarkdownRenderer] = None,
        index_renderer: Optional[MarkdownRenderer] = None,
    ):
        self.repo = repo
        self.post_renderer = post_renderer or MarkdownRenderer(RICH)
        self.index_renderer = index_renderer or MarkdownRenderer(PLAIN)

    def get_post(self, slug: str) -> Post:
        try:
            raw = self.repo.read(slug)
        except PostNotFoundError:
            raw = self._find_listed(slug)
        metadata, body = parse_document(raw)
        content = self.post_renderer.render(body)
        return build_post(metadata, content, fallback_slug=slug)

    def _find_listed(self, slug: str) -> str:
        """
        Resolve a slug the way the index assigns them: the declared ``Slug``,
        else the file name. Covers nested files and ones whose declared slug
        differs from their name. First match in traversal order wins.
        """
        for doc in self.repo.list_documents():
            block, _ = split_front_matter(doc.text)
            try:
                declared = decode_metadata(block).slug
            except MalformedFrontMatterError:
                declared = ""
            if (declared or doc.slug) == slug:
                logger.debug(f"Resolved slug {slug} to {doc.path}")
                return doc.text
        raise PostNotFoundError(f"No post found for slug {slug!r}")

    def list_posts(self) -> List[Post]:
        """
        Assemble every post under the root, in traversal order.
        The first document that fails aborts the whole listing.
        """
        posts = []
        for doc in self.repo.list_documents():
            try:
                posts.append(self._assemble(doc))
            except PostError as e:
                logger.error(f"Failed to load post {doc.path}: {e}")
                raise
        _warn_duplicate_slugs(posts)
        return posts

    def collect_posts(self) -> Tuple[List[Post], List[PostFailure]]:
        """Like ``list_posts`` but keeps going, reporting failed documents separately."""
        posts: List[Post] = []
        failures: List[PostFailure] = []
        for doc in self.repo.list_documents():
            try:
                posts.append(self._assemble(doc))
            except PostError as e:
                logger.warning(f"Skipping post {doc.path}: {e}")
                failures.append(PostFailure(doc.path, e))
        _warn_duplicate_slugs(posts)
        return posts, failures

    def _assemble(self, doc) -> Post:
        logger.debug(f"Parsing post {doc.path}")
        metadata, body = parse_document(doc.text)
        content = self.index_renderer.render(body)
        return build_post(metadata, content, fallback_slug=doc.slug)


def build_post(metadata: PostMetadata, content, fallback_slug: str = "") -> Post:
    data = metadata.model_dump(by_alias=True)
    if not data["Slug"]:
        data["Slug"] = fallback_slug
    return Post.model_validate({**data, "content": content})


def _warn_duplicate_slugs(posts: List[Post]) -> None:
    seen = set()
    for post in posts:
        if post.slug in seen:
            logger.warning(f"Duplicate post slug: {post.slug}")
        seen.add(post.slug)

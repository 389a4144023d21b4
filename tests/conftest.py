import textwrap
from pathlib import Path

from mdblog.errors import PostNotFoundError
from mdblog.repos.posts_repo import SourceDocument


class FakeRepo:
    """
    In-memory post source keyed by slug.
    Values are dedented so tests can write documents inline.
    """

    def __init__(self, docs: dict[str, str]):
        self.docs = {slug: textwrap.dedent(text).lstrip() for slug, text in docs.items()}
        self.reads = []

    def read(self, slug: str) -> str:
        self.reads.append(slug)
        if slug not in self.docs:
            raise PostNotFoundError(slug)
        return self.docs[slug]

    def list_documents(self):
        for slug, text in self.docs.items():
            yield SourceDocument(path=Path(f"{slug}.md"), slug=slug, text=text)


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    Pass an exception instance to make the call raise it.
    """

    def __init__(self, list_posts_return=None, get_post_return=None):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self.requested = []

    def list_posts(self):
        if isinstance(self._list_posts_return, Exception):
            raise self._list_posts_return
        return self._list_posts_return

    def get_post(self, slug: str):
        self.requested.append(slug)
        if isinstance(self._get_post_return, Exception):
            raise self._get_post_return
        return self._get_post_return


def write_templates(directory: Path) -> Path:
    """Write bare-bones index/post templates for router tests."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "index.html").write_text(
        "{% for post in posts %}<li>{{ post.slug }}|{{ post.title }}</li>{% endfor %}"
    )
    (directory / "post.html").write_text(
        "<h1>{{ post.title }}</h1><div class=\"content\">{{ post.content }}</div>"
    )
    return directory

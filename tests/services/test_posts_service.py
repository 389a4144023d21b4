import pytest
from markupsafe import Markup

from mdblog.errors import (
    MalformedFrontMatterError,
    PostNotFoundError,
    RenderError,
)
from mdblog.repos.posts_repo import FilePostsRepo
from mdblog.schemas.blog import Post, PostMetadata
from mdblog.services.markdown_renderer import MarkdownRenderer
from mdblog.services.posts_service import PostsService, build_post
from tests.conftest import FakeRepo


def test_get_post_decodes_metadata_and_renders_rich_body():
    repo = FakeRepo(
        {
            "hello": """
            ---
            Title: Hello
            Slug: hello
            Order: 2
            author:
              name: Ada
            ---
            # Hello

            ```python
            print("hi")
            ```
            """
        }
    )
    service = PostsService(repo)

    post = service.get_post("hello")

    assert isinstance(post, Post)
    assert post.title == "Hello"
    assert post.slug == "hello"
    assert post.order == 2
    assert post.author.name == "Ada"
    assert post.description == ""
    assert '<h1 id="hello">Hello</h1>' in post.content
    assert "language-python" in post.content
    assert repo.reads == ["hello"]


def test_get_post_without_front_matter_uses_zero_metadata():
    service = PostsService(FakeRepo({"plain": "# Only body\n"}))

    post = service.get_post("plain")

    assert post.title == ""
    assert post.order == 0
    assert "Only body</h1>" in post.content


def test_get_post_fills_missing_slug_from_request():
    service = PostsService(FakeRepo({"no-slug": "---\nTitle: T\n---\nbody\n"}))

    assert service.get_post("no-slug").slug == "no-slug"


def test_get_post_missing_raises_not_found():
    service = PostsService(FakeRepo({}))

    with pytest.raises(PostNotFoundError):
        service.get_post("nope")


def test_get_post_malformed_front_matter_raises():
    service = PostsService(FakeRepo({"bad": "---\nOrder: [1, 2\n---\nbody\n"}))

    with pytest.raises(MalformedFrontMatterError):
        service.get_post("bad")


def test_get_post_render_failure_short_circuits():
    class BoomRenderer:
        def render(self, body):
            raise RenderError("boom")

    service = PostsService(FakeRepo({"x": "body"}), post_renderer=BoomRenderer())

    with pytest.raises(RenderError):
        service.get_post("x")


def test_list_posts_returns_one_post_per_document_in_order():
    repo = FakeRepo(
        {
            "b-second": "---\nTitle: Second\nSlug: second\nOrder: 1\n---\nSecond body\n",
            "a-first": "---\nTitle: First\nSlug: first\nOrder: 2\n---\nFirst body\n",
            "c-bare": "Bare body\n",
        }
    )
    service = PostsService(repo)

    posts = service.list_posts()

    assert [p.slug for p in posts] == ["second", "first", "c-bare"]
    assert all(p.content for p in posts)
    assert posts[0].content == "<p>Second body</p>"


def test_list_posts_uses_plain_profile():
    service = PostsService(FakeRepo({"h": "# Heading\n"}))

    posts = service.list_posts()

    assert posts[0].content == "<h1>Heading</h1>"


def test_list_posts_fails_entirely_on_one_bad_document():
    repo = FakeRepo(
        {
            "good": "---\nTitle: Good\n---\nok\n",
            "bad": "---\nOrder: nope\n---\nbroken\n",
        }
    )
    service = PostsService(repo)

    with pytest.raises(MalformedFrontMatterError):
        service.list_posts()


def test_list_posts_empty_repo():
    assert PostsService(FakeRepo({})).list_posts() == []


def test_list_posts_logs_duplicate_slugs(caplog):
    repo = FakeRepo(
        {
            "one": "---\nSlug: same\n---\n1\n",
            "two": "---\nSlug: same\n---\n2\n",
        }
    )

    with caplog.at_level("WARNING"):
        posts = PostsService(repo).list_posts()

    assert len(posts) == 2
    assert any("Duplicate post slug: same" in rec.message for rec in caplog.records)


def test_collect_posts_reports_failures_separately():
    repo = FakeRepo(
        {
            "good": "---\nTitle: Good\n---\nok\n",
            "bad": "---\nOrder: nope\n---\nbroken\n",
        }
    )

    posts, failures = PostsService(repo).collect_posts()

    assert [p.title for p in posts] == ["Good"]
    assert len(failures) == 1
    assert failures[0].path.name == "bad.md"
    assert isinstance(failures[0].error, MalformedFrontMatterError)


def test_custom_renderers_are_used():
    service = PostsService(
        FakeRepo({"x": "# X\n"}),
        post_renderer=MarkdownRenderer("plain"),
    )

    assert service.get_post("x").content == "<h1>X</h1>"


def test_build_post_keeps_declared_slug():
    post = build_post(PostMetadata(Slug="declared"), Markup(""), fallback_slug="file-name")

    assert post.slug == "declared"


def test_every_listed_slug_resolves_to_its_post(tmp_path):
    root = tmp_path / "markdown"
    (root / "2024").mkdir(parents=True)
    (root / "hello.md").write_text("---\nTitle: Hello\n---\nhi\n", encoding="utf-8")
    (root / "2024" / "a-post.md").write_text(
        "---\nTitle: Nested\n---\nnested\n", encoding="utf-8"
    )
    (root / "LOUD.MD").write_text("---\nTitle: Loud\n---\nloud\n", encoding="utf-8")
    (root / "file-name.md").write_text(
        "---\nTitle: Declared\nSlug: custom-slug\n---\ndeclared\n", encoding="utf-8"
    )
    service = PostsService(FilePostsRepo(root))

    listed = service.list_posts()

    assert sorted(p.slug for p in listed) == ["LOUD", "a-post", "custom-slug", "hello"]
    for post in listed:
        resolved = service.get_post(post.slug)
        assert resolved.slug == post.slug
        assert resolved.title == post.title


def test_get_post_lookup_still_misses_unknown_slug(tmp_path):
    root = tmp_path / "markdown"
    (root / "2024").mkdir(parents=True)
    (root / "2024" / "a-post.md").write_text("nested\n", encoding="utf-8")

    with pytest.raises(PostNotFoundError):
        PostsService(FilePostsRepo(root)).get_post("b-post")


def test_get_post_by_stem_of_malformed_nested_file_raises_malformed(tmp_path):
    root = tmp_path / "markdown"
    (root / "2024").mkdir(parents=True)
    (root / "2024" / "broken.md").write_text("---\nOrder: nope\n---\nx\n", encoding="utf-8")

    with pytest.raises(MalformedFrontMatterError):
        PostsService(FilePostsRepo(root)).get_post("broken")

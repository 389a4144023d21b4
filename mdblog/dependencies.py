from fastapi import Depends
from fastapi.templating import Jinja2Templates

from mdblog.repos.posts_repo import FilePostsRepo
from mdblog.services.markdown_renderer import PLAIN, RICH, MarkdownRenderer
from mdblog.services.posts_service import PostsService
from mdblog.settings import Settings, get_settings


def get_posts_repo(current_settings: Settings = Depends(get_settings)):
    return FilePostsRepo(current_settings.POSTS_DIR, current_settings.POST_EXTENSIONS)


def get_posts_service(
    repo=Depends(get_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(
        repo=repo,
        post_renderer=MarkdownRenderer(RICH, code_style=current_settings.CODE_STYLE),
        index_renderer=MarkdownRenderer(PLAIN),
    )


def get_templates(current_settings: Settings = Depends(get_settings)):
    return Jinja2Templates(directory=current_settings.TEMPLATES_DIR)

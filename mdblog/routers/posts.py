import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates

from mdblog import dependencies as deps
from mdblog.errors import PostError, PostNotFoundError
from mdblog.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    service: PostsService = Depends(deps.get_posts_service),
    templates: Jinja2Templates = Depends(deps.get_templates),
):
    """Render the index page listing every post."""
    try:
        posts = service.list_posts()
    except PostError as e:
        logger.error(f"Failed to list posts: {e}")
        return PlainTextResponse("Error loading posts", status_code=500)

    return templates.TemplateResponse(request, "index.html", {"posts": posts})


@router.get("/posts/{slug}", response_class=HTMLResponse)
def get_post(
    slug: str,
    request: Request,
    service: PostsService = Depends(deps.get_posts_service),
    templates: Jinja2Templates = Depends(deps.get_templates),
):
    """Render a single post by slug."""
    try:
        post = service.get_post(slug)
    except PostNotFoundError as e:
        logger.warning(f"Post not found: {e}")
        return PlainTextResponse("Post not found", status_code=404)
    except PostError as e:
        logger.error(f"Failed to render post {slug}: {e}")
        return PlainTextResponse("Error rendering post", status_code=500)

    return templates.TemplateResponse(request, "post.html", {"post": post})

class PostError(Exception):
    """Base class for failures while loading or rendering a post."""


class PostNotFoundError(PostError):
    """No source document exists for the requested slug."""


class ContentReadError(PostError):
    """The source exists but could not be read."""


class MalformedFrontMatterError(PostError):
    """The front-matter block is not a valid metadata mapping."""


class RenderError(PostError):
    """The Markdown converter failed internally."""

import logging
import re
from typing import TextIO, Tuple

import yaml
from frontmatter.default_handlers import YAMLHandler
from pydantic import ValidationError

from mdblog.errors import MalformedFrontMatterError
from mdblog.schemas.blog import PostMetadata

logger = logging.getLogger(__name__)


RAW_TEXT_TAGS = {"tag:yaml.org,2002:bool", "tag:yaml.org,2002:timestamp"}


class MetadataLoader(yaml.SafeLoader):
    """
    SafeLoader that leaves booleans and timestamps as the text written in the
    file, so ``Title: No`` or ``Date: 2024-01-01`` stay strings.
    """

    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag not in RAW_TEXT_TAGS]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }


class DelimitedYAMLHandler(YAMLHandler):
    """
    YAML front matter opened and closed by a line holding only ``---``.
    Stricter than the stock handler, which also accepts longer runs of dashes.
    """

    FM_BOUNDARY = re.compile(r"^---[ \t]*$", re.MULTILINE)

    def is_delimiter(self, line: str) -> bool:
        return self.FM_BOUNDARY.fullmatch(line.rstrip("\r\n")) is not None

    def load(self, fm, **kwargs):
        kwargs.setdefault("Loader", MetadataLoader)
        return super().load(fm, **kwargs)


handler = DelimitedYAMLHandler()


def _normalize(text: str) -> str:
    return text.lstrip("\ufeff").replace("\r\n", "\n")


def split_front_matter(text: str) -> Tuple[str, str]:
    """
    Split a document into its metadata block and Markdown body.

    The block is recognized only when the first line is a delimiter and a
    closing delimiter follows. Anything else, including an opening delimiter
    that is never closed, yields an empty block and the whole text as body.
    A header with no opening delimiter (``Title: X\\n---\\nbody``) is body too.
    """
    text = _normalize(text)
    if not handler.detect(text):
        return "", text

    try:
        block, body = handler.split(text)
    except ValueError:
        logger.debug("Front matter opened but never closed, treating document as body")
        return "", text

    if body.startswith("\n"):
        body = body[1:]
    return block.strip("\n"), body


def read_front_matter(stream: TextIO) -> Tuple[str, TextIO]:
    """
    Consume only the front-matter block from a text stream.

    Returns the block and the same stream, positioned right after the closing
    delimiter. The closing delimiter may be the last line without a newline.
    If no complete block is found the stream is rewound and the block is empty.
    """
    start = stream.tell()
    first = stream.readline().lstrip("\ufeff")
    if not handler.is_delimiter(first):
        stream.seek(start)
        return "", stream

    lines = []
    for line in iter(stream.readline, ""):
        if handler.is_delimiter(line):
            return "".join(lines).replace("\r\n", "\n"), stream
        lines.append(line)

    logger.debug("Front matter opened but never closed, rewinding stream")
    stream.seek(start)
    return "", stream


def decode_metadata(block: str) -> PostMetadata:
    """Deserialize a metadata block. An empty block gives zero-valued metadata."""
    if not block.strip():
        return PostMetadata()

    try:
        data = handler.load(block)
    except yaml.YAMLError as e:
        raise MalformedFrontMatterError(f"Invalid YAML in front matter: {e}") from e

    if data is None:
        return PostMetadata()
    if not isinstance(data, dict):
        raise MalformedFrontMatterError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )

    try:
        return PostMetadata.model_validate(data)
    except ValidationError as e:
        raise MalformedFrontMatterError(f"Invalid front matter values: {e}") from e


def parse_document(text: str) -> Tuple[PostMetadata, str]:
    block, body = split_front_matter(text)
    return decode_metadata(block), body

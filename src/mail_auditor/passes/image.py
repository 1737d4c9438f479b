import asyncio
import base64
import binascii
import re
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote

from bs4 import Tag

from ..dom.core import PassContext, PassDefinition, PassResult, pass_spec
from ..errors import ProbeError
from ..model import ImageRecord

_REMOTE_SRC = re.compile(r'^https?://', re.IGNORECASE)


def image_name(src: str) -> str:
    """Final path segment of the source, as shown to authors."""
    return src.split("/")[-1]


def to_kb(size_bytes: Optional[int]) -> Optional[float]:
    if size_bytes is None:
        return None
    return round(size_bytes / 1024, 1)


def _data_uri_size(src: str) -> Optional[int]:
    """Decoded payload length of a data: URI."""
    header, sep, payload = src.partition(",")
    if not sep:
        return None
    if header.lower().endswith(";base64"):
        try:
            return len(base64.b64decode(payload, validate=False))
        except (binascii.Error, ValueError):
            return None
    return len(unquote(payload).encode("utf-8"))


def _local_size(src: str, base_path: Optional[Path]) -> Optional[int]:
    """
    Byte length of a local image resolved under base_path.
    Sources resolving outside base_path are ignored. Unusable paths (NUL bytes,
    symlink loops) raise ValueError or RuntimeError from pathlib.
    """
    if base_path is None:
        return None

    relative = unquote(src.split("?", 1)[0].split("#", 1)[0]).lstrip("/\\")
    if not relative:
        return None

    root = base_path.resolve()
    candidate = (root / relative).resolve()
    if root != candidate and root not in candidate.parents:
        return None
    if not candidate.is_file():
        return None
    return candidate.stat().st_size


async def resolve_size(src: str, ctx: PassContext) -> Optional[int]:
    """Best-effort byte size of an image source. Never raises."""
    if not src:
        return None

    try:
        if _REMOTE_SRC.match(src):
            if ctx.http_service is None:
                return None
            return await ctx.http_service.fetch_content_length(src)
        if src.lower().startswith("data:"):
            return _data_uri_size(src)
        return await asyncio.to_thread(_local_size, src, ctx.doc.base_path)
    except ProbeError as e:
        ctx.logger.debug("Image size unavailable: %s", e)
    except (OSError, ValueError, RuntimeError) as e:
        ctx.logger.debug("Image size unavailable for %s: %s", src, e)
    return None


def _read_img(tag: Tag) -> tuple:
    src = tag.get("src") or ""
    alt = tag.get("alt")
    return src, alt


@pass_spec(fields=["images", "images_without_alt"])
async def audit_images(ctx: PassContext) -> PassResult:
    """Lists every <img> in document order and the ones lacking alt text."""
    tags = ctx.doc.soup.find_all("img")
    sources = [_read_img(tag) for tag in tags]

    if ctx.options.resolve_image_sizes:
        sizes = await asyncio.gather(*(resolve_size(src, ctx) for src, _ in sources))
    else:
        sizes = [None] * len(sources)

    images: List[ImageRecord] = []
    for (src, alt), size in zip(sources, sizes):
        images.append(ImageRecord(
            src=src,
            name=image_name(src),
            alt=alt,
            size_bytes=size,
            size_kb=to_kb(size),
        ))

    # Same objects, not copies
    without_alt = [img for img in images if img.is_alt_missing]

    ctx.logger.debug("Found %d images, %d without alt", len(images), len(without_alt))
    return {"images": images, "images_without_alt": without_alt}


# --- DEFINITION ---
DEFINITION = PassDefinition(
    name="images",
    runner=audit_images
)

import asyncio
from typing import Dict, List, Optional

from bs4 import Tag

from ..dom.core import PassContext, PassDefinition, PassResult, pass_spec
from ..model import LinkRecord, BrokenLinkRecord, LinkType

NO_TEXT_PLACEHOLDER = "(no text)"

# First match wins
_PREFIX_TYPES = (
    ("http", "external"),
    ("mailto:", "email"),
    ("tel:", "phone"),
    ("sms:", "sms"),
    ("#", "anchor"),
)


def classify_link(href: str) -> LinkType:
    for prefix, link_type in _PREFIX_TYPES:
        if href.startswith(prefix):
            return link_type
    return "other"


def link_text(tag: Tag) -> str:
    """Visible text, falling back to the first nested image's alt, then its src."""
    text = tag.get_text().strip()
    if text:
        return text

    img = tag.find("img")
    if img is not None:
        alt = (img.get("alt") or "").strip()
        if alt:
            return alt
        src = (img.get("src") or "").strip()
        if src:
            return src
    return NO_TEXT_PLACEHOLDER


def parse_link(tag: Tag) -> Optional[LinkRecord]:
    href = tag.get("href")
    if not href:
        return None
    return LinkRecord(
        href=href,
        text=link_text(tag),
        target=tag.get("target"),
        type=classify_link(href),
    )


async def probe_external(links: List[LinkRecord], ctx: PassContext) -> List[BrokenLinkRecord]:
    """
    HEAD-probes the unique external hrefs once each, bounded by max_probes and
    the global deadline. Links whose probe did not finish before the deadline
    are left unreported.
    """
    opts = ctx.options
    external = [link for link in links if link.type == "external"]
    unique_hrefs = list(dict.fromkeys(link.href for link in external))

    if opts.max_probes is not None and len(unique_hrefs) > opts.max_probes:
        ctx.logger.warning(
            "Probing %d of %d external links (max_probes reached)", opts.max_probes, len(unique_hrefs)
        )
        unique_hrefs = unique_hrefs[:opts.max_probes]

    if not unique_hrefs:
        return []

    total = len(unique_hrefs)
    done = 0

    async def probe(href: str) -> bool:
        nonlocal done
        ok = await ctx.http_service.check_reachable(href)
        done += 1
        if opts.progress_callback:
            opts.progress_callback(done, total)
        return ok

    tasks: Dict[str, asyncio.Task] = {href: asyncio.ensure_future(probe(href)) for href in unique_hrefs}
    try:
        _, pending = await asyncio.wait(tasks.values(), timeout=opts.probe_deadline)
    except asyncio.CancelledError:
        for task in tasks.values():
            task.cancel()
        raise

    if pending:
        ctx.logger.warning("Probe deadline of %ss reached, %d probes cancelled", opts.probe_deadline, len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    broken_hrefs = set()
    for href, task in tasks.items():
        if task.cancelled():
            continue
        if task.exception() is not None:
            ctx.logger.debug("Probe for %s raised %r", href, task.exception())
            broken_hrefs.add(href)
        elif not task.result():
            broken_hrefs.add(href)

    return [BrokenLinkRecord.from_link(link) for link in external if link.href in broken_hrefs]


@pass_spec(fields=["links", "broken_links"])
async def audit_links(ctx: PassContext) -> PassResult:
    """Lists every anchor with an href and reports unreachable external targets."""
    links = [
        record for record in (parse_link(tag) for tag in ctx.doc.soup.find_all("a", href=True))
        if record is not None
    ]

    broken: List[BrokenLinkRecord] = []
    if ctx.options.probe_links and ctx.http_service is not None:
        broken = await probe_external(links, ctx)

    ctx.logger.debug("Found %d links, %d broken", len(links), len(broken))
    return {"links": links, "broken_links": broken}


# --- DEFINITION ---
DEFINITION = PassDefinition(
    name="links",
    runner=audit_links
)

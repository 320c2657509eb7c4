# ABOUTME: Sample blog content for fresh installs.
# ABOUTME: Inserts the starter posts through BlogService, skipping slugs already present.

import structlog

from joydao_site.models import BlogPostInput, PostStatus
from joydao_site.services import BlogService

log = structlog.get_logger()

SAMPLE_POSTS: list[BlogPostInput] = [
    BlogPostInput(
        title="Welcome to JOYDAO.Z",
        slug="welcome-to-joydao",
        excerpt="Booting up the creative terminal...",
        content=(
            "# Welcome\n\n"
            "This is the first transmission from the JOYDAO.Z terminal. "
            "Expect notes on music, code and the space between them."
        ),
        status=PostStatus.PUBLISHED,
    ),
    BlogPostInput(
        title="Signals and Systems",
        slug="signals-and-systems",
        excerpt="Transmission clear.",
        content=(
            "# Signals and Systems\n\n"
            "Every project starts as noise. This log tracks how it becomes signal."
        ),
        status=PostStatus.PUBLISHED,
    ),
]


async def seed_posts(service: BlogService, posts: list[BlogPostInput] | None = None) -> int:
    """Create each sample post whose slug is not taken yet.

    Returns:
        Number of posts created.
    """
    created = 0
    for post in posts if posts is not None else SAMPLE_POSTS:
        if await service.get_by_slug(post.slug):
            log.info("seed_post_skipped", slug=post.slug)
            continue
        await service.create_post(post)
        created += 1
    log.info("seed_complete", created=created)
    return created

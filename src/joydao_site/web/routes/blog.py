# ABOUTME: Public blog procedures.
# ABOUTME: Published posts, lookup by slug, and tag listings.

from fastapi import APIRouter, Query

from joydao_site.models import BlogPostRecord, BlogTagRecord
from joydao_site.web.dependencies import BlogSvc

router = APIRouter(prefix="/api/trpc", tags=["blog"])


@router.get("/blog.getPublishedPosts", response_model=list[BlogPostRecord])
async def get_published_posts(blog: BlogSvc):
    return await blog.list_published()


@router.get("/blog.getPostBySlug", response_model=BlogPostRecord | None)
async def get_post_by_slug(blog: BlogSvc, slug: str = Query(...)):
    """Get a published post by slug; drafts and unknown slugs return null."""
    return await blog.get_published_by_slug(slug)


@router.get("/blog.getAllTags", response_model=list[BlogTagRecord])
async def get_all_tags(blog: BlogSvc):
    return await blog.list_tags()


@router.get("/blog.getTagsForPost", response_model=list[BlogTagRecord])
async def get_tags_for_post(blog: BlogSvc, post_id: int = Query(..., alias="postId")):
    return await blog.get_tags_for_post(post_id)

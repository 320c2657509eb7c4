# ABOUTME: Owner-only procedures for messages, subscribers, posts and tags.
# ABOUTME: Every handler depends on AdminCaller, which re-checks the owner identity per call.

from fastapi import APIRouter, Query

from joydao_site.models import (
    ActionResult,
    BlogPostInput,
    BlogPostRecord,
    BlogPostResult,
    BlogPostUpdateInput,
    BlogTagCreate,
    BlogTagRecord,
    ContactMessageRecord,
    EmailInput,
    IdInput,
    PostTagInput,
    SubscriptionRecord,
)
from joydao_site.web.dependencies import AdminCaller, BlogSvc, ContactSvc, NewsletterSvc

router = APIRouter(prefix="/api/trpc", tags=["admin"])


# Contact and newsletter


@router.get("/admin.getContactMessages", response_model=list[ContactMessageRecord])
async def get_contact_messages(_admin: AdminCaller, contact: ContactSvc):
    return await contact.list_messages()


@router.get("/admin.getNewsletterSubscribers", response_model=list[SubscriptionRecord])
async def get_newsletter_subscribers(_admin: AdminCaller, newsletter: NewsletterSvc):
    """List active subscriptions only."""
    return await newsletter.get_active_subscribers()


@router.post("/admin.unsubscribeEmail", response_model=ActionResult)
async def unsubscribe_email(_admin: AdminCaller, payload: EmailInput, newsletter: NewsletterSvc):
    await newsletter.unsubscribe(payload.email)
    return ActionResult(success=True, message="Email unsubscribed successfully")


# Blog posts


@router.get("/admin.getAllBlogPosts", response_model=list[BlogPostRecord])
async def get_all_blog_posts(_admin: AdminCaller, blog: BlogSvc):
    """List every post, drafts included, by creation time."""
    return await blog.list_all()


@router.get("/admin.getBlogPostBySlug", response_model=BlogPostRecord | None)
async def get_blog_post_by_slug(_admin: AdminCaller, blog: BlogSvc, slug: str = Query(...)):
    return await blog.get_by_slug(slug)


@router.post("/admin.createBlogPost", response_model=BlogPostResult)
async def create_blog_post(_admin: AdminCaller, payload: BlogPostInput, blog: BlogSvc):
    post = await blog.create_post(payload)
    return BlogPostResult(success=True, message="Blog post created successfully", post=post)


@router.post("/admin.updateBlogPost", response_model=BlogPostResult)
async def update_blog_post(_admin: AdminCaller, payload: BlogPostUpdateInput, blog: BlogSvc):
    """Update a post; an unknown id is a no-op reported with ``post: null``."""
    post = await blog.update_post(payload.id, payload)
    if post is None:
        return BlogPostResult(success=True, message="Blog post not found; nothing updated")
    return BlogPostResult(success=True, message="Blog post updated successfully", post=post)


@router.post("/admin.deleteBlogPost", response_model=ActionResult)
async def delete_blog_post(_admin: AdminCaller, payload: IdInput, blog: BlogSvc):
    await blog.delete_post(payload.id)
    return ActionResult(success=True, message="Blog post deleted successfully")


# Tags


@router.post("/admin.createBlogTag", response_model=BlogTagRecord)
async def create_blog_tag(_admin: AdminCaller, payload: BlogTagCreate, blog: BlogSvc):
    return await blog.create_tag(payload)


@router.post("/admin.deleteBlogTag", response_model=ActionResult)
async def delete_blog_tag(_admin: AdminCaller, payload: IdInput, blog: BlogSvc):
    await blog.delete_tag(payload.id)
    return ActionResult(success=True, message="Blog tag deleted successfully")


@router.post("/admin.addTagToPost", response_model=ActionResult)
async def add_tag_to_post(_admin: AdminCaller, payload: PostTagInput, blog: BlogSvc):
    await blog.add_tag_to_post(payload.post_id, payload.tag_id)
    return ActionResult(success=True, message="Tag added to post")


@router.post("/admin.removeTagFromPost", response_model=ActionResult)
async def remove_tag_from_post(_admin: AdminCaller, payload: PostTagInput, blog: BlogSvc):
    await blog.remove_tag_from_post(payload.post_id, payload.tag_id)
    return ActionResult(success=True, message="Tag removed from post")

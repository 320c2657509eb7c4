# ABOUTME: Services module for site business rules.
# ABOUTME: Exports contact, newsletter, blog and user services.

from joydao_site.services.blog_service import BlogService
from joydao_site.services.contact_service import ContactService
from joydao_site.services.newsletter_service import NewsletterService
from joydao_site.services.user_service import UserService

__all__ = ["BlogService", "ContactService", "NewsletterService", "UserService"]

# ABOUTME: Routes module initialization.
# ABOUTME: Exports one procedure router per area.

from joydao_site.web.routes import admin, auth, blog, contact, newsletter, system

__all__ = ["admin", "auth", "blog", "contact", "newsletter", "system"]

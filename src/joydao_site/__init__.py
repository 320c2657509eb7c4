# ABOUTME: Main package for the JOYDAO.Z site backend.
# ABOUTME: Exports settings access; the app factory lives in joydao_site.web.app.

from joydao_site.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]

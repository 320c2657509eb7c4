# ABOUTME: Web package for the procedure HTTP interface.
# ABOUTME: Exposes the FastAPI application factory.

from joydao_site.web.app import create_app

__all__ = ["create_app"]

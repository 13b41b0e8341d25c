"""
API modules for Solar Site Layouts.
"""
from sitelayout.api.layouts import router as layouts_router
from sitelayout.api.sites import get_site_file_delegate, router as sites_router

__all__ = ["get_site_file_delegate", "sites_router", "layouts_router"]

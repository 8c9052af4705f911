"""
API module - Routes and endpoints for the parser service.
"""


from .routes import router as main_router

__all__ = ["main_router"]

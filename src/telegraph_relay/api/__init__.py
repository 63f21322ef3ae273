"""HTTP routers exposed by the relay."""

from .files import router as files_router
from .upload import router as upload_router
from .webhook import router as webhook_router

__all__ = ["files_router", "upload_router", "webhook_router"]

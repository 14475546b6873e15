from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sqlmapper.config import config
from sqlmapper.utils.logger import setup_logger

# Create the FastAPI instance
app = FastAPI(title="sqlmapper API", version=config.get('api', {}).get('version', 'v1'))

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from .routes import api_router  # noqa: E402

app.include_router(api_router)

route_logger = setup_logger('routes')
for route in app.routes:
    if hasattr(route, 'methods'):
        route_logger.debug(f"{sorted(route.methods)}  {route.path}")

__all__ = ['app']

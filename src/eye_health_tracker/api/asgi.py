"""ASGI entrypoint, served as `eye_health_tracker.api.asgi:app`."""

from eye_health_tracker.api.app import create_app
from eye_health_tracker.config import Settings
from eye_health_tracker.containers import build_container

settings = Settings()
app = create_app(build_container(settings))

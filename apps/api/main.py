"""Thin API launcher.

This is the uvicorn entrypoint. All application logic lives in the corsguard package.
Run with: uvicorn apps.api.main:app --reload  (install the "server" extra)

Note: The app instance is created here (not in corsguard.app) to avoid import-time
side effects. This allows tests to import create_app without reading the environment.
"""

from corsguard.app import create_app_from_env

# Create the application instance
app = create_app_from_env()

__all__ = ["app"]

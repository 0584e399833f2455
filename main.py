"""Main application entry point."""

from campus_events.config.environment import IS_PRODUCTION_ENVIRONMENT, LOG_LEVEL, PORT
from campus_events.api.app import app

if __name__ == "__main__":
    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - string reference so hot-reload can re-import the app
        import uvicorn
        uvicorn.run(
            "campus_events.api.app:app",
            host="0.0.0.0",
            port=PORT,
            reload=True,
            log_level="debug"
        )
    else:
        # Production mode - use string reference for proper multi-worker support
        import uvicorn
        uvicorn.run(
            "campus_events.api.app:app",  # String reference required for multiple workers
            host="0.0.0.0",
            port=PORT,
            reload=False,
            workers=4,
            log_level=LOG_LEVEL.lower(),
            proxy_headers=True,
            forwarded_allow_ips="*"
        )

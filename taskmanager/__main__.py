"""
Run the API server: ``python -m taskmanager``.
"""

import uvicorn

from taskmanager.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "taskmanager.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()

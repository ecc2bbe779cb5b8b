"""Run the relay with uvicorn: ``python -m hotel_relay``."""

import uvicorn

from hotel_relay.core.config import settings


def main() -> None:
    uvicorn.run(
        "hotel_relay.main:asgi_app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

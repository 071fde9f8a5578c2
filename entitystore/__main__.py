"""Run the API with uvicorn: python -m entitystore."""

import uvicorn

from entitystore.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "entitystore.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()

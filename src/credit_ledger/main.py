from __future__ import annotations

import uvicorn

from credit_ledger.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "credit_ledger.bootstrap:create_asgi_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()

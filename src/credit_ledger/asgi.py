from __future__ import annotations

from credit_ledger.bootstrap import create_asgi_app

app = create_asgi_app()

from __future__ import annotations

import sys
from pathlib import Path

# Allow running as: python scripts/registry_smoketest.py
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from fastapi.testclient import TestClient

from signup_service.main import create_app
from signup_service.settings import Settings


def main() -> int:
    # No AWS access needed: the secret is passed in directly.
    app = create_app(Settings(SECRET_PROVIDER="none"), secret="smoke-secret")
    c = TestClient(app)

    r = c.get("/stats")
    print("/stats(empty)", r.status_code, r.json())

    r = c.post("/signup", json={"name": "Smoke", "email": "smoke@example.com", "password": "pw"})
    print("/signup", r.status_code, r.json())
    if r.status_code != 201:
        return 1

    r = c.post("/login", json={"email": "smoke@example.com", "password": "pw"})
    print("/login", r.status_code, r.json())
    if r.status_code != 200:
        return 1

    r = c.get("/users")
    print("/users", r.status_code, r.json())

    r = c.get("/stats")
    print("/stats(after)", r.status_code, r.json())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

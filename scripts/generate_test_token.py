#!/usr/bin/env python3
"""Generate bearer tokens for manual API testing.

Usage: python scripts/generate_test_token.py <user-id> [RECRUITER|ADMIN|SUPERADMIN]
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.deps import issue_smoke_token  # noqa: E402
from src.core.auth import Role  # noqa: E402


def main(argv: list[str]) -> None:
    if not argv:
        print(__doc__)
        raise SystemExit(1)

    user_id = argv[0]
    role = Role(argv[1].upper()) if len(argv) > 1 else Role.RECRUITER
    token = issue_smoke_token(user_id, role=role)
    print(f"{role.value} token for {user_id}:\n{token}")


if __name__ == "__main__":
    main(sys.argv[1:])

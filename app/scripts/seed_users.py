"""
Add random users to a running server. Run from project root:
  python -m app.scripts.seed_users COUNT [--base-url URL]
Example:
  python -m app.scripts.seed_users 25 --base-url http://localhost:3001/api/v1
"""
import argparse
import sys

from app.client.api_client import DEFAULT_BASE_URL, ApiClient, ApiClientError
from app.schemas.user import GENERATE_MAX_COUNT


def _batches(total: int) -> list[int]:
    """Split total into request-sized chunks (the API accepts at most GENERATE_MAX_COUNT)."""
    full, rest = divmod(total, GENERATE_MAX_COUNT)
    return [GENERATE_MAX_COUNT] * full + ([rest] if rest else [])


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate demo users on a Userdesk server.")
    parser.add_argument("count", type=int, help="Number of users to add (>= 1)")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL including /api/v1")
    args = parser.parse_args(argv)

    if args.count < 1:
        print("COUNT must be at least 1.", file=sys.stderr)
        return 1

    created = 0
    with ApiClient(base_url=args.base_url) as client:
        try:
            for size in _batches(args.count):
                result = client.generate_users(size)
                created += len(result.get("data") or [])
            stats = client.get_users_stats().get("data") or {}
        except ApiClientError as e:
            print(f"Seeding failed after {created} users: {e.message}", file=sys.stderr)
            return 1

    print(f"Created {created} users; server now holds {stats.get('total', '?')}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Two-way sync script: reconcile the local plan with the remote store.

Usage:
    # Sync today's plan using the token from PLANSYNC_AUTH_TOKEN
    python scripts/sync.py

    # Sync a specific day's tasks
    python scripts/sync.py --date 2024-03-05

    # Sign in first, then sync
    python scripts/sync.py --email me@example.com --password secret

    # Point at another data directory or remote
    python scripts/sync.py --data-dir ~/.plansync --remote-url https://api.example.com
"""
import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

import httpx

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from plansync.config import Settings
from plansync.container import build_container
from plansync.logger import setup_logging


async def run(args: argparse.Namespace) -> int:
    """Build the components, optionally sign in, and sync once."""
    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.remote_url:
        overrides["remote_api_url"] = args.remote_url
    settings = Settings(**overrides)
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    container = build_container(settings)
    try:
        if args.email:
            try:
                user = await container.auth_service.sign_in(args.email, args.password or "")
            except httpx.HTTPError as e:
                print(f"Error: Sign-in failed: {e}")
                return 1
            print(f"Signed in as {user.email}")

        print(f"Remote: {settings.remote_api_url}")
        print(f"Data: {settings.data_dir}")

        result = await container.sync_engine.sync_all(task_date=args.date)

        print("\n=== Sync Summary ===")
        print(f"Objectives: {len(container.objective_store.list())}")
        print(f"Tasks: {len(container.task_store.list())}")
        if result.success:
            state = container.sync_engine.get_state()
            print(f"Synced at {state.last_sync_at.isoformat()}")
            return 0
        print(f"Sync failed: {result.error}")
        return 1
    finally:
        await container.close()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Two-way sync with the remote plan store")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Task date to reconcile, YYYY-MM-DD (default: today, UTC)",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Local data directory (default: PLANSYNC_DATA_DIR or .plansync)",
    )
    parser.add_argument(
        "--remote-url",
        default=None,
        help="Remote API base URL (default: PLANSYNC_REMOTE_API_URL)",
    )
    parser.add_argument("--email", default=None, help="Sign in with this email before syncing")
    parser.add_argument("--password", default=None, help="Password for --email")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )

    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()

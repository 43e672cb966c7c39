"""
Check that the Ehub backend is reachable and, optionally, list its projects.

Usage:
    python scripts/check_api_health.py [--base-url URL] [--projects] [--log-level LEVEL]
"""
import sys
import os
import argparse
import asyncio

import structlog

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ehub.config import settings
from ehub.logging import setup_logging
from ehub.services.ehub_client import EhubApiClient
from ehub.services.project_mapper import map_projects_from_backend


async def check(base_url: str, list_projects: bool) -> int:
    client = EhubApiClient(base_url=base_url)

    health = await client.health_check()
    if not health.ok:
        print(f"[ERROR] {base_url}/health: {health.error}")
        return 1
    print(f"[OK] {base_url}/health: {health.data}")

    if list_projects:
        if not client.token:
            print("[WARN]  No stored token; /projects will probably be rejected")
        result = await client.get_projects()
        if not result.ok:
            print(f"[ERROR] /projects: {result.error}")
            return 1
        projects = map_projects_from_backend(result.data)
        print(f"\n{len(projects)} project(s)")
        for p in projects:
            print(f"  {p.id or '-':<10} {p.status:<32} {p.progress:>5.0f}%  {p.name}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Ehub API health check")
    parser.add_argument("--base-url", default=settings.api_base_url, help="API base URL (default: EHUB_API_URL)")
    parser.add_argument("--projects", action="store_true", help="Also fetch and summarize /projects")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (e.g. DEBUG)")
    args = parser.parse_args()

    setup_logging(args.log_level)
    structlog.contextvars.bind_contextvars(base_url=args.base_url)
    sys.exit(asyncio.run(check(args.base_url, args.projects)))


if __name__ == "__main__":
    main()

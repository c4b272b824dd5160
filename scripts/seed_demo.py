"""
Prepare a local GameHaven store.

Creates (or destructively migrates) the schema and inserts the demo users
and games on first run. Idempotent: seeding is skipped once the first-run
flag is set, unless --force is given.

Usage:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --database-url sqlite+aiosqlite:///./data/demo.db --force
"""

import argparse
import asyncio

from gamehaven.core.config import Settings
from gamehaven.main import GameHaven


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialize and seed the GameHaven store")
    parser.add_argument("--database-url", help="Override GAMEHAVEN_DATABASE_URL")
    parser.add_argument("--data-directory", help="Override GAMEHAVEN_DATA_DIRECTORY")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Clear the first-run flag and seed again",
    )
    return parser.parse_args()


async def main(args: argparse.Namespace) -> None:
    overrides = {}
    if args.database_url:
        overrides["database_url"] = args.database_url
    if args.data_directory:
        overrides["data_directory"] = args.data_directory

    app = GameHaven.create(Settings(**overrides))
    try:
        await app.start(seed=False)
        if args.force:
            app.seeder.flags.clear()
        seeded = await app.seeder.seed_if_first_run()

        print("Demo data seeded." if seeded else "Demo data already present. Skipping...")
        print(f"Users: {await app.users.get_total_users()}")
        print(f"Games: {await app.games.get_total_games()}")
    finally:
        await app.close()


if __name__ == "__main__":
    asyncio.run(main(parse_args()))

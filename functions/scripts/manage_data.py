# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""
Seed, reset or inspect the configured journal store from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from journal_backend.db import DbClient
from journal_backend.dependencies import get_db_client
from journal_backend.errors import JournalApiError
from journal_backend.seeding import reset_application_data, seed_all
from journal_shared.firebase_constants import APP_SETTINGS_DOC

logger = logging.getLogger(__name__)


def store_status(db: DbClient) -> dict:
    return {
        "users": db.count_users(),
        "journals": db.count_journals(),
        "settings": db.get_app_data(APP_SETTINGS_DOC) is not None,
    }


def run(command: str, db: DbClient, assume_yes: bool = False) -> int:
    if command == "seed":
        result = seed_all(db)
        logger.info("Seeded targets: %s", result.as_dict())
    elif command == "reset":
        if not assume_yes:
            logger.error("Refusing to reset without --yes")
            return 2
        reset_application_data(db)
    print(json.dumps(store_status(db), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Journal store maintenance")
    parser.add_argument(
        "command",
        choices=["seed", "reset", "status"],
        help="seed empty targets, wipe and reseed everything, or print counts",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm a destructive reset",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    try:
        return run(args.command, get_db_client(), assume_yes=args.yes)
    except JournalApiError as exc:
        logger.error("%s failed: %s", args.command, exc.message)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

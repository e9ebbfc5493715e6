import argparse
import json
import logging
import os
import sys

# Add project root to path
sys.path.append(os.getcwd())

from dotenv import load_dotenv
load_dotenv(os.path.join(os.getcwd(), '.env'))

from livescore_seo.infrastructure.repositories.seo_settings_repository import get_seo_settings_repository

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_payload(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level value must be an object")
    return data


def seed(args) -> int:
    logger.info("--- SEO SETTINGS SEED START ---")

    repository = get_seo_settings_repository()
    repository.create_tables()

    payload = load_payload(args.file)
    if args.page:
        ok = repository.upsert_page(args.page, payload)
        target = f"page '{args.page}'"
    else:
        ok = repository.upsert_record(args.kind, args.key, payload)
        target = f"{args.kind} record '{args.key}'"

    if not ok:
        logger.error(f"Failed to seed {target}")
        return 1

    logger.info(f"Seeded {target} from {args.file}")
    logger.info("--- SEO SETTINGS SEED COMPLETE ---")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Write an SEO settings row from a JSON file.")
    parser.add_argument("file", help="JSON file with the store partial (or page document)")
    parser.add_argument("--kind", choices=["global", "match", "league", "player"], default="global")
    parser.add_argument("--key", default=None, help="Record key (defaults to the SEO_DB_KEY_* value)")
    parser.add_argument("--page", default=None, help="Write a seo_page row with this slug instead")
    args = parser.parse_args()

    if args.key is None:
        defaults = {
            "global": os.getenv("SEO_DB_KEY_GLOBAL", "livesoccerr"),
            "match": os.getenv("SEO_DB_KEY_MATCH", "livesoccerr_match"),
            "league": os.getenv("SEO_DB_KEY_LEAGUE", "livesoccerr_league"),
            "player": os.getenv("SEO_DB_KEY_PLAYER", "livesoccerr_player"),
        }
        args.key = defaults[args.kind]

    return seed(args)


if __name__ == "__main__":
    sys.exit(main())

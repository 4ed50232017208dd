import argparse
import logging
import sys

from query_wizard.core.exceptions import ConfigError, GenerationError
from query_wizard.core.generator import SearchStringGenerator
from query_wizard.models.models import DATABASE_PROFILES, Database
from query_wizard.utils.constants import APP_LOGGER_NAME, DEFAULT_CONFIG_PATH, LOG_DIR
from query_wizard.utils.io_utils import load_config, load_default_api_key
from query_wizard.utils.logging_config import setup_logging

logger = logging.getLogger(f"{APP_LOGGER_NAME}.main")

DATABASE_CHOICES = {
    "scopus": Database.SCOPUS,
    "pubmed": Database.PUBMED,
    "cnki": Database.CNKI,
    "wos": Database.WOS,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="query-wizard",
        description="Generate advanced literature-search strings for Scopus, PubMed, CNKI and Web of Science.",
    )
    parser.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Path to the YAML configuration file (default: {DEFAULT_CONFIG_PATH}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    domain_parser = subparsers.add_parser("domain", help="Identify the parent research domain of a description.")
    domain_parser.add_argument("description", help="Free-text research description.")

    query_parser = subparsers.add_parser("query", help="Generate a search string for a known domain.")
    query_parser.add_argument("domain", help="Research domain, e.g. '锂离子电池'.")
    query_parser.add_argument("--database", choices=sorted(DATABASE_CHOICES), default="scopus")

    run_parser = subparsers.add_parser("run", help="Identify the domain, then generate the search string.")
    run_parser.add_argument("description", help="Free-text research description.")
    run_parser.add_argument("--database", choices=sorted(DATABASE_CHOICES), default="scopus")
    return parser


def print_query(query: str, database: Database) -> None:
    print(f"{database.value} 高级检索式:")
    print(query)
    print(f"\n前往 {database.value}: {DATABASE_PROFILES[database].search_url}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2

    setup_logging(LOG_DIR, level=config.logging.level)
    generator = SearchStringGenerator(
        default_api_key=load_default_api_key(),
        request_timeout=config.request_timeout,
    )
    settings = config.api

    try:
        if args.command == "domain":
            print(generator.identify_domain(args.description, settings))
            return 0

        if args.command == "query":
            database = DATABASE_CHOICES[args.database]
            print_query(generator.generate_search_string(args.domain, database, settings), database)
            return 0

        database = DATABASE_CHOICES[args.database]
        domain = generator.identify_domain(args.description, settings)
        print(f"领域: {domain}\n")
        print_query(generator.generate_search_string(domain, database, settings), database)
        return 0
    except GenerationError as exc:
        print(f"Generation failed:\n{exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

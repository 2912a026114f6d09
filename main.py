#!/usr/bin/env python3
"""Group Membership Sync CLI.

Mirrors the members of configured source groups into their target service
desk organization. Membership is only ever added; nothing is removed.

Architecture:
    - SyncSettings holds the explicit run configuration (env + flags)
    - EnvCredentialStore resolves the environment's principal to a secret
    - DirectoryClient is the shared HTTP layer for fetch and write calls
    - SyncOrchestrator drives aggregation and batched writes per sync-group

Environment Variables Required:
    - ORGSYNC_SYNC_GROUPS: "(name; stgID,prodID; src1,src2)(name2; ...)"
    - ORGSYNC_BASE_URLS: "stagingURL,productionURL"
    - ORGSYNC_USERNAMES: "stagingPrincipal,productionPrincipal"
    - ORGSYNC_SECRET_<PRINCIPAL>: secret for the selected principal

Example Usage:
    $ python main.py                                  # Sync ALL in staging
    $ python main.py --environment production         # Sync ALL in production
    $ python main.py --target support                 # Sync one sync-group
    $ python main.py --max-concurrent 4 --verbose     # Parallel fetch/write

Exit Codes:
    0 - completed (including skipped sync-groups and failed chunks)
    1 - configuration, credential or empty-membership failure
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone

from dotenv import load_dotenv

load_dotenv()

# Local imports
from src.orgsync.api import (
    ConfigurationError,
    CredentialError,
    CredentialStore,
    DirectoryClient,
    EmptyMembershipError,
    EnvCredentialStore,
)
from src.orgsync.config import SyncSettings
from src.orgsync.sync.adapters import DirectoryMembershipAPI, ServiceDeskOrganizationAPI
from src.orgsync.sync.domain.entities import Environment, SyncResult
from src.orgsync.sync.use_cases import (
    BatchWriter,
    GroupAggregator,
    PagedMemberFetcher,
    PaginationConfig,
    SyncOrchestrator,
    parse_sync_groups,
)

logger = logging.getLogger("orgsync")

EXIT_OK = 0
EXIT_FATAL = 1


async def run_sync(
    settings: SyncSettings,
    credential_store: CredentialStore,
) -> list[SyncResult]:
    """Run the sync described by settings.

    Args:
        settings: Run configuration
        credential_store: Secret store for the environment's principal

    Returns:
        One SyncResult per selected sync-group

    Raises:
        ConfigurationError: Empty/invalid sync-group config or unknown target
        CredentialError: No secret for the principal
        EmptyMembershipError: A named sync-group aggregated no members
    """
    sync_groups = parse_sync_groups(settings.sync_groups_raw)
    credential = credential_store.get_credential(settings.principal)

    async with DirectoryClient(
        settings.base_url,
        credential,
        max_connections=max(settings.max_concurrent, 1),
    ) as client:
        fetcher = PagedMemberFetcher(
            DirectoryMembershipAPI(client),
            PaginationConfig(
                page_size=settings.page_size,
                delay_between_pages=settings.page_delay,
                max_pages=settings.max_pages,
            ),
        )
        orchestrator = SyncOrchestrator(
            aggregator=GroupAggregator(fetcher, max_concurrent=settings.max_concurrent),
            writer=BatchWriter(
                ServiceDeskOrganizationAPI(client),
                batch_size=settings.batch_size,
                max_concurrent=settings.max_concurrent,
            ),
            sync_groups=sync_groups,
            environment=settings.environment,
        )
        return await orchestrator.run(settings.target)


def print_summary(results: list[SyncResult]) -> None:
    """Print one line per sync-group."""
    print("\n" + "=" * 60)
    print("SYNC COMPLETE")
    print("=" * 60)
    for result in results:
        if result.skipped:
            print(f"{result.name}: skipped ({result.skip_reason})")
            continue
        line = (
            f"{result.name} -> {result.target_id}: "
            f"{result.pushed}/{result.unique} pushed ({result.fetched} fetched)"
        )
        if result.failed_ranges:
            line += f", failed ranges {result.failed_ranges}"
        print(line)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mirror source group members into target organizations",
    )
    parser.add_argument(
        "--target",
        help="Sync-group name to process, or ALL (default: ORGSYNC_TARGET or ALL)",
    )
    parser.add_argument(
        "--environment",
        choices=["staging", "production"],
        help="Environment selecting base URL, principal and target IDs",
    )
    parser.add_argument(
        "--config",
        dest="sync_groups_raw",
        help="Sync-group configuration string (overrides ORGSYNC_SYNC_GROUPS)",
    )
    parser.add_argument("--page-size", type=int, help="Members per listing page")
    parser.add_argument("--batch-size", type=int, help="Usernames per write call")
    parser.add_argument(
        "--max-concurrent",
        type=int,
        help="Parallel source-group fetches and chunk writes",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(
    argv: list[str] | None = None,
    credential_store: CredentialStore | None = None,
) -> int:
    """CLI entry point; returns the process exit code."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    start_time = datetime.now(timezone.utc)
    logger.info(f"Starting at {start_time.isoformat()}")

    try:
        settings = SyncSettings.from_env(
            sync_groups_raw=args.sync_groups_raw,
            environment=Environment.parse(args.environment) if args.environment else None,
            target=args.target,
            page_size=args.page_size,
            batch_size=args.batch_size,
            max_concurrent=args.max_concurrent,
        )
        logger.info(f"Config: {settings!r}")

        results = asyncio.run(run_sync(settings, credential_store or EnvCredentialStore()))

    except (ConfigurationError, CredentialError, EmptyMembershipError) as e:
        logger.error(f"Sync aborted: {e}")
        return EXIT_FATAL

    print_summary(results)
    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    logger.info(f"Finished in {duration:.2f}s")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

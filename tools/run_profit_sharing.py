"""Run or preview profit sharing for seasons and print the JSON result."""

from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path
from typing import Any, Sequence

from campaigns.config import settings
from campaigns.models.profit_sharing import ProfitSharingFailure, ProfitSharingSummary
from campaigns.services.profit_sharing import (
    ProfitSharingEngine,
    ProfitSharingStores,
    build_stores,
)

logger = logging.getLogger("tools.run_profit_sharing")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run profit sharing for one or more seasons.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--season-id",
        action="append",
        dest="season_ids",
        help="Season to process. Repeat to produce a multi-season summary.",
    )
    target.add_argument(
        "--campaign-id",
        help="Report potential profit across a campaign's eligible seasons.",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Tag the result as a preview (single season only).",
    )
    parser.add_argument("--database-url", help="Overrides DATABASE_URL.")
    parser.add_argument("--seed", type=int, help="Seed the donor draw for reproducible output.")
    parser.add_argument("--output", type=Path, help="Write JSON here instead of stdout.")
    return parser.parse_args(argv)


def build_engine(
    *,
    database_url: str | None = None,
    seed: int | None = None,
    stores: ProfitSharingStores | None = None,
) -> ProfitSharingEngine:
    rng = random.Random(seed) if seed is not None else None
    return ProfitSharingEngine(
        stores=stores or build_stores(database_url),
        rng=rng,
    )


def run(args: argparse.Namespace, engine: ProfitSharingEngine) -> tuple[dict[str, Any], bool]:
    """Dispatch to the requested view; returns the payload and whether it succeeded."""
    if args.campaign_id:
        stats = engine.get_campaign_profit_stats(args.campaign_id)
        return stats.to_payload(), True

    season_ids: list[str] = args.season_ids
    if len(season_ids) == 1:
        season_id = season_ids[0]
        if args.simulate:
            outcome = engine.simulate_profit_sharing(season_id)
        else:
            outcome = engine.execute_profit_sharing(season_id)
        return outcome.to_payload(), not isinstance(outcome, ProfitSharingFailure)

    if args.simulate:
        logger.warning("--simulate applies to single-season runs; producing a summary instead.")
    summary: ProfitSharingSummary = engine.get_profit_sharing_summary(season_ids)
    return summary.to_payload(), summary.summary.failed == 0


def main(argv: Sequence[str] | None = None, *, stores: ProfitSharingStores | None = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    args = parse_args(argv)
    try:
        engine = build_engine(database_url=args.database_url, seed=args.seed, stores=stores)
        payload, succeeded = run(args, engine)
    except Exception as exc:  # pragma: no cover - shell invocation safety
        logger.error("Profit sharing run failed: %s", exc)
        return 1

    serialized = json.dumps(payload, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(serialized + "\n", encoding="utf-8")
        logger.info("Wrote profit sharing result to %s", args.output)
    else:
        print(serialized)
    return 0 if succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())

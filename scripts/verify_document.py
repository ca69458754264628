#!/usr/bin/env python3
"""
Verify pointer reachability of an HTML file in headless Chromium.

Applies the layering plan, probes every interactive control, remediates the
ones that stay unreachable and prints the VerificationReport as JSON.
This script is for inspection only; it doesn't modify the input file.

Usage:
    python scripts/verify_document.py page.html
    python scripts/verify_document.py page.html --plan plan.json --no-remediate
    python scripts/verify_document.py page.html --dry-run
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from stackcheck.config import settings
from stackcheck.contracts import StackcheckError
from stackcheck.layering import LayeringEngine, LayeringPlan
from stackcheck.orchestrator import VerificationSession
from stackcheck.sandbox import render_html

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("verify_document")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("path", type=Path, help="HTML file to verify")
    parser.add_argument("--plan", type=Path, help="JSON layering plan (defaults to the canonical plan)")
    parser.add_argument("--dry-run", action="store_true", help="print the offline assignment preview only")
    parser.add_argument("--no-remediate", action="store_true", help="report unreachable controls without fixing them")
    return parser.parse_args(argv)


def load_plan(path) -> LayeringPlan:
    if path is None:
        return LayeringPlan.default()
    return LayeringPlan.from_dict(json.loads(path.read_text(encoding="utf-8")))


async def main(argv=None) -> int:
    args = parse_args(argv)
    html = args.path.read_text(encoding="utf-8")

    try:
        plan = load_plan(args.plan)

        if args.dry_run:
            assignments = LayeringEngine().preview(html, plan)
            print(json.dumps([a.to_dict() for a in assignments], indent=2))
            return 0

        logger.info(f"Verifying {args.path.name}")
        async with render_html(html) as document:
            session = VerificationSession(plan=plan, remediate=not args.no_remediate)
            report = await session.run(document)
    except StackcheckError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 2

    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.passed else 1


if __name__ == '__main__':
    sys.exit(asyncio.run(main()))

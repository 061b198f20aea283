#!/usr/bin/env python3
"""Generate a sample portfolio and write its dashboard and report.

Seeds an in-memory servicing store with synthetic clients, loans and
payments, then computes the dashboard KPIs, the installment due table and
the portfolio report, and writes everything to JSON files (and optionally
to the console).

Usage::

    python scripts/generate_dashboard.py --clients 20 --window 90d --seed 42
"""

import argparse
import logging
from datetime import date
from pathlib import Path

from loan_core.calculations import (
    build_portfolio_report,
    compute_dashboard_metrics,
    derive_installments,
    due_installments,
    status_distribution,
    time_series,
)
from loan_core.config import LoanCoreConfig
from loan_core.exceptions import LoanCoreError
from loan_core.logging import setup_logging
from loan_core.models.financial import TimeWindow, UserRole
from loan_core.scenarios import LoanPortfolioScenario
from loan_core.sinks import ConsoleSink, JsonFileSink

logger = logging.getLogger("loan_core.scripts.generate_dashboard")


def parse_args(config: LoanCoreConfig) -> argparse.Namespace:
    """Parse command-line arguments, defaulting to environment config."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--clients", type=int, default=config.seed_data.num_clients)
    parser.add_argument("--seed", type=int, default=config.seed)
    parser.add_argument(
        "--window",
        choices=[w.value for w in TimeWindow],
        default=config.dashboard.default_time_window.value,
    )
    parser.add_argument("--as-of", type=date.fromisoformat, default=None, help="YYYY-MM-DD")
    parser.add_argument("--client-id", default=None, help="Compute the dashboard as this client")
    parser.add_argument("--output-dir", type=Path, default=config.output.json_output_dir)
    parser.add_argument("--pretty", action="store_true", default=config.output.pretty_json)
    parser.add_argument("--console", action="store_true", help="Also print to stdout")
    parser.add_argument("--log-level", default=config.log_level)
    return parser.parse_args()


def main() -> int:
    config = LoanCoreConfig.from_env()
    args = parse_args(config)
    setup_logging(args.log_level, config.log_format)

    as_of = args.as_of or date.today()
    window = TimeWindow(args.window)
    role = UserRole.CLIENT if args.client_id else UserRole.ADMINISTRATOR

    try:
        scenario = LoanPortfolioScenario(
            num_clients=args.clients,
            on_time_rate=config.seed_data.on_time_rate,
            seed=args.seed,
            as_of=as_of,
        )
        store = scenario.generate()

        loans = store.visible_loans(role, args.client_id)
        payments = store.visible_payments(role, args.client_id)
        metrics = compute_dashboard_metrics(
            loans,
            role,
            args.client_id,
            window,
            clients=store.clients,
            as_of=as_of,
            config=config.dashboard,
        )
        report = build_portfolio_report(store.clients.values(), loans, payments, as_of=as_of)
        schedules = {
            loan.loan_id: derive_installments(loan, store.get_loan_payments(loan.loan_id), as_of=as_of)
            for loan in loans
        }

        sinks: list = [JsonFileSink(args.output_dir, pretty=args.pretty)]
        if args.console:
            sinks.append(ConsoleSink(max_records=5))

        scenario.export(sinks)
        for sink in sinks:
            sink.write_batch("dashboard", [metrics])
            sink.write_batch("status_distribution", status_distribution(loans))
            sink.write_batch("time_series", time_series(loans, payments, window, as_of=as_of))
            sink.write_batch("due_installments", [due_installments(loans, payments, as_of=as_of)])
            sink.write_batch("installments", [schedules])
            sink.write_batch("report", [report])
            sink.close()
    except LoanCoreError:
        logger.exception("Dashboard generation failed")
        return 1

    logger.info(
        "Dashboard: %d loans, receivable %s, %d due soon",
        metrics.total_loans,
        metrics.total_receivable,
        len(metrics.upcoming_due_soon),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""
Run the full capacity-planning pipeline:
  1. Build zone snapshots from (mock) upstream records
  2. Compute current deficit and urgency per zone
  3. Project the two-month recruitment need and budget
  4. Simulate recruitment outcomes and allocate the marketing budget
  5. Print the planning report

Usage:
    cd scripts/
    python run_pipeline.py --as-of 2025-07-18 --forecast 2400
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add src to the Python path so capacity_engine is importable
_SRC = Path(__file__).resolve().parent.parent / "src"
sys.path.insert(0, str(_SRC))

from capacity_engine.recruitment import (
    CapacityPlanningPipeline,
    Channel,
    MonteCarloSimulator,
    PlanningConfig,
    RecruitmentScenario,
)
from capacity_engine.recruitment.data_loader import (
    daily_demand_from_jobs,
    rotation_rates_from_frame,
    snapshots_from_frame,
)
from mock_data import generate_channels, generate_completed_jobs, generate_zone_metrics


def parse_args():
    parser = argparse.ArgumentParser(description="Two-month recruitment capacity plan")
    parser.add_argument("--as-of", default="2025-07-18", help="Planning date (YYYY-MM-DD)")
    parser.add_argument("--forecast", type=float, default=2400, help="National monthly service forecast")
    parser.add_argument("--budget", type=float, default=150000, help="Marketing budget to allocate")
    parser.add_argument("--trials", type=int, default=5000, help="Monte Carlo trials")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    as_of = date.fromisoformat(args.as_of)
    config = PlanningConfig()

    # ---------------------------------------------------------------
    # Step 1: Upstream records -> zone snapshots
    # ---------------------------------------------------------------
    print("=" * 70)
    print("STEP 1: LOADING ZONE DATA")
    print("=" * 70)

    jobs = generate_completed_jobs(as_of=args.as_of, seed=args.seed)
    metrics_df = generate_zone_metrics(seed=args.seed)
    demand = daily_demand_from_jobs(jobs, as_of, window_days=90)
    metrics_df["demand_per_day"] = metrics_df["zone_id"].map(demand)

    snapshots = snapshots_from_frame(metrics_df, config)
    rotation = rotation_rates_from_frame(metrics_df)
    print(f"  Completed jobs loaded: {len(jobs)}")
    print(f"  Zones: {len(snapshots)}")

    channels = [
        Channel.from_spend(r.channel_id, r.spend, r.acquired, r.conversion_rate, r.capacity)
        for r in generate_channels().itertuples()
    ]

    # ---------------------------------------------------------------
    # Step 2: Run the pipeline
    # ---------------------------------------------------------------
    print("\n" + "=" * 70)
    print(f"STEP 2: PLANNING AS OF {as_of}")
    print("=" * 70)

    pipeline = CapacityPlanningPipeline(
        config,
        simulator=MonteCarloSimulator(seed=args.seed),
    )
    scenario = RecruitmentScenario(
        budget=args.budget, cpa=2200.0, conversion_rate=0.55, retention_rate=0.80
    )
    variance = RecruitmentScenario(
        budget=(args.budget * 0.10) ** 2, cpa=300.0 ** 2, conversion_rate=0.05 ** 2, retention_rate=0.05 ** 2
    )
    result = pipeline.run(
        snapshots,
        rotation,
        as_of,
        args.forecast,
        scenario=scenario,
        variance=variance,
        channels=channels,
        marketing_budget=args.budget,
        trials=args.trials,
    )

    # ---------------------------------------------------------------
    # Step 3: Print results
    # ---------------------------------------------------------------
    print(f"\n{'Zone':<20} {'Workers':<9} {'Demand/d':<10} {'Deficit':<9} {'Urgency':<8}")
    print("-" * 60)
    for snapshot, deficit in zip(snapshots, result.deficits):
        print(
            f"{deficit.zone_name:<20} {snapshot.metrics.active_workers:<9} "
            f"{snapshot.demand_per_day:<10.1f} {deficit.total_deficit:<9} {deficit.urgency_score:<8}"
        )

    plan = result.plan
    for month in (plan.target_month, plan.next_month):
        print(f"\n{'='*80}")
        print(
            f"  {month.month_name.upper()} {month.year}  need={month.total_need}  "
            f"budget={month.budget_estimate:,.0f}  level={month.urgency_level.value}  "
            f"deadline in {month.days_to_deadline} days"
        )
        print(f"{'='*80}")
        print(f"{'Zone':<20} {'Current':<9} {'Required':<9} {'Gap':<6} {'Rotation':<9} {'Need':<6} {'Level':<16}")
        print("-" * 80)
        for need in month.zone_needs:
            print(
                f"{need.zone_name:<20} {need.current_workers:<9} {need.required_workers:<9} "
                f"{need.current_gap:<6} {need.rotation_impact:<9} {need.final_need:<6} "
                f"{need.urgency_level.value:<16}"
            )

    print(f"\n{'='*80}")
    print("  CRITICAL ACTIONS")
    print(f"{'='*80}")
    for action in plan.critical_actions:
        print(f"  - {action}")

    sim = result.simulation
    print(f"\n{'='*80}")
    print("  SUMMARY")
    print(f"{'='*80}")
    print(f"  Overall budget        : {plan.overall_budget:,.2f} {config.currency}")
    print(f"  Monitoring team       : {plan.monitoring.required_capacity} needed / "
          f"{plan.monitoring.current_capacity} available")
    print(f"  Expected recruits     : {sim.mean_outcome:.1f} "
          f"(95% CI {sim.confidence_interval_95[0]:.0f}-{sim.confidence_interval_95[1]:.0f})")
    print(f"  P(recruits >= {sim.target:<4})   : {sim.success_probability:.1%}")
    print("  Channel allocation    :")
    for allocation in result.allocations:
        print(
            f"    {allocation.channel_id:<12} {allocation.budget_allocated:>12,.2f} "
            f"-> {allocation.expected_recruits:.1f} recruits"
        )


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Financial Plan Demonstration

This script walks through the planning workflow:
1. Build a profile for a moderate 32-year-old saving for retirement
2. Plan it from the profile alone
3. Plan it again with sandbox account balances
4. Ask what changes if income rises

Run: python examples/plan_demo.py
"""

from finpath_core import analyze_change, plan
from finpath_core.accounts import CachingAccountProvider, DemoAccountProvider
from finpath_core.config import FinpathConfig, configure_logging


PROFILE = {
    "age": 32,
    "income": 85000,
    "riskTolerance": "Moderate",
    "investmentGoal": "Retirement",
    "timeHorizon": "30 years",
    "currentSavings": 45000,
    "monthlyExpenses": 4200,
    "hasEmergencyFund": False,
    "has401k": True,
    "employerMatch": 0.05,
}


def print_plan(result) -> None:
    alloc = result.portfolio_analysis.allocation
    print(
        f"  - Allocation: {alloc.stocks}% stocks / {alloc.bonds}% bonds / "
        f"{alloc.real_estate}% real estate / {alloc.cash}% cash"
    )
    print(
        f"  - Expected Return: {result.portfolio_analysis.expected_return}% "
        f"({result.portfolio_analysis.risk_level.value} risk)"
    )
    retirement = result.retirement_plan
    print(f"  - Retirement Target: ${retirement.target_nest_egg:,.0f}")
    print(f"  - Monthly Savings Needed: ${retirement.monthly_savings_needed:,.2f}")
    fund = result.emergency_fund
    print(
        f"  - Emergency Fund: ${fund.current_amount:,.2f} of ${fund.recommended_amount:,.2f} "
        f"({fund.status.value})"
    )
    print(f"  - Net Worth: ${result.current_financials.net_worth:,.2f}")
    print(f"  - Health Score: {result.health_score.total_score}/100 ({result.health_score.grade})")
    print("  - Recommendations:")
    for rec in result.recommendations:
        print(f"      [{rec.priority.value}] {rec.title}")
    for warning in result.warnings:
        print(f"  - Note: {warning.message}")


def main():
    configure_logging(FinpathConfig(log_level="WARNING"))

    print("=" * 70)
    print("FINPATH - Financial Plan Demo")
    print("=" * 70)
    print()

    print("Step 1: Planning from the profile alone...")
    print_plan(plan(PROFILE))
    print()

    print("Step 2: Planning with sandbox account balances...")
    provider = CachingAccountProvider(DemoAccountProvider(), ttl_seconds=300)
    snapshot = provider.get_snapshot("sandbox-token")
    print(f"  - Linked Accounts: {len(snapshot.accounts)}")
    print_plan(plan(PROFILE, accounts=snapshot))
    print()

    print("Step 3: What if income rises to $100,000?")
    impact = analyze_change(PROFILE, {"income": 100000})
    for insight in impact.insights:
        print(f"  - {insight}")

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()

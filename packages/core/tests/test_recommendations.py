"""Tests for the recommendation builder."""

import pytest

from finpath_core.allocation import AllocationEngine
from finpath_core.emergency import EmergencyFundPlanner
from finpath_core.financials import FinancialsSummarizer
from finpath_core.goals import GoalPlanner
from finpath_core.models import AccountsSnapshot, Priority, Profile, RecommendationCategory
from finpath_core.recommendations import PlanContext, RecommendationBuilder
from finpath_core.retirement import RetirementPlanner


@pytest.fixture
def build_context(fixed_now):
    def _build(profile: Profile, accounts=None) -> PlanContext:
        emergency = EmergencyFundPlanner().plan(profile, accounts)
        return PlanContext(
            profile=profile,
            allocation=AllocationEngine().allocate(profile).allocation,
            retirement=RetirementPlanner().plan(profile),
            emergency=emergency,
            financials=FinancialsSummarizer().summarize(profile, accounts),
            goal_plan=GoalPlanner().plan(profile, emergency, fixed_now),
        )

    return _build


@pytest.fixture
def builder() -> RecommendationBuilder:
    return RecommendationBuilder()


def categories(recommendations) -> list[RecommendationCategory]:
    return [r.category for r in recommendations]


class TestRecommendationBuilder:
    """Rule triggers, ordering and deduplication."""

    def test_s1_without_accounts(self, builder, build_context, s1_profile):
        recommendations = builder.build(build_context(s1_profile))

        assert categories(recommendations) == [
            RecommendationCategory.EMERGENCY_FUND,
            RecommendationCategory.EMPLOYER_MATCH,
            RecommendationCategory.RETIREMENT_CONTRIBUTIONS,
            RecommendationCategory.REBALANCING,
            RecommendationCategory.TAX_ADVANTAGED,
        ]
        assert recommendations[0].priority == Priority.HIGH
        assert recommendations[1].priority == Priority.HIGH

    def test_employer_match_action_item(self, builder, build_context, s1_profile):
        recommendations = builder.build(build_context(s1_profile))
        match = next(r for r in recommendations if r.category == RecommendationCategory.EMPLOYER_MATCH)

        assert "Contribute at least $354.17 monthly to your 401(k)" in match.action_items

    def test_debt_paydown_with_liabilities(self, builder, build_context, s1_profile, demo_accounts):
        context = build_context(s1_profile, AccountsSnapshot.from_balances(demo_accounts))
        recommendations = builder.build(context)

        assert categories(recommendations)[:3] == [
            RecommendationCategory.EMERGENCY_FUND,
            RecommendationCategory.EMPLOYER_MATCH,
            RecommendationCategory.DEBT_PAYDOWN,
        ]
        debt = recommendations[2]
        assert debt.priority == Priority.HIGH
        assert "$1,250" in debt.description

    def test_adequate_fund_no_emergency_entry(self, builder, build_context, make_profile):
        profile = make_profile(monthlyExpenses=1000)
        assert RecommendationCategory.EMERGENCY_FUND not in categories(
            builder.build(build_context(profile))
        )

    def test_no_match_without_401k(self, builder, build_context, make_profile):
        profile = make_profile(has401k=False)
        assert RecommendationCategory.EMPLOYER_MATCH not in categories(
            builder.build(build_context(profile))
        )

    def test_no_match_without_employer_match(self, builder, build_context, make_profile):
        profile = make_profile(employerMatch=0)
        assert RecommendationCategory.EMPLOYER_MATCH not in categories(
            builder.build(build_context(profile))
        )

    def test_tax_advantaged_income_threshold(self, builder, build_context, make_profile):
        at_threshold = builder.build(build_context(make_profile(income=50000)))
        above = builder.build(build_context(make_profile(income=50001)))

        assert RecommendationCategory.TAX_ADVANTAGED not in categories(at_threshold)
        assert RecommendationCategory.TAX_ADVANTAGED in categories(above)

    def test_rebalancing_always_present(self, builder, build_context, make_profile):
        profile = make_profile(income=0, currentSavings=0, monthlyExpenses=0)
        recommendations = builder.build(build_context(profile))

        assert categories(recommendations) == [RecommendationCategory.REBALANCING]

    def test_house_goal_is_last(self, builder, build_context, make_profile):
        profile = make_profile(investmentGoal="House", timeHorizon="5 years")
        recommendations = builder.build(build_context(profile))

        goal = recommendations[-1]
        assert goal.category == RecommendationCategory.GOAL_SAVINGS
        assert "Save $1,303 per month until January 2031" in goal.action_items

    def test_emergency_goal_recommendation(self, builder, build_context, make_profile):
        profile = make_profile(investmentGoal="Emergency Fund")
        recommendations = builder.build(build_context(profile))

        assert recommendations[-1].category == RecommendationCategory.GOAL_SAVINGS
        assert recommendations[-1].title == "Fund Your Emergency Reserve"

    def test_action_item_counts(self, builder, build_context, s1_profile, demo_accounts):
        context = build_context(s1_profile, AccountsSnapshot.from_balances(demo_accounts))
        for recommendation in builder.build(context):
            assert 1 <= len(recommendation.action_items) <= 4

    def test_duplicate_categories_suppressed(self, build_context, s1_profile):
        builder = RecommendationBuilder()
        builder._rules = (builder._rebalancing, builder._rebalancing)

        recommendations = builder.build(build_context(s1_profile))
        assert categories(recommendations) == [RecommendationCategory.REBALANCING]

    def test_stable_order(self, builder, build_context, s1_profile):
        context = build_context(s1_profile)
        assert builder.build(context) == builder.build(context)

"""Year-by-year growth projection for a plan."""

from .models.plan import PortfolioAnalysis, ProjectionPoint, RetirementPlan
from .models.profile import Profile
from .policy import MAX_PROJECTION_YEARS


def project_growth(
    profile: Profile,
    portfolio: PortfolioAnalysis,
    retirement: RetirementPlan,
) -> list[ProjectionPoint]:
    """Project current savings plus the recommended monthly savings.

    Contributions are made annually (12 x monthly savings needed) and grow
    at the portfolio's expected return. The projection covers the planning
    horizon, capped at 30 years.
    """
    years = min(profile.horizon_years, MAX_PROJECTION_YEARS)
    rate = portfolio.expected_return / 100
    initial = profile.current_savings
    annual_contribution = retirement.monthly_savings_needed * 12

    points = []
    for year in range(1, years + 1):
        contributions = initial + annual_contribution * year
        if rate == 0:
            value = contributions
        else:
            growth = (1 + rate) ** year
            value = initial * growth + annual_contribution * (growth - 1) / rate
        points.append(
            ProjectionPoint(
                year=year,
                age=profile.age + year,
                total_contributions=contributions,
                projected_value=value,
                gains=value - contributions,
            )
        )
    return points

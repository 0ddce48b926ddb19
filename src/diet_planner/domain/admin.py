"""Admin domain models."""

from dataclasses import dataclass

from diet_planner.domain.profiles import UserProfile


@dataclass(frozen=True)
class DashboardTotals:
    """Headline counts for the admin dashboard."""

    users: int
    recipes: int
    meal_plans: int
    pending_recipes: int


@dataclass(frozen=True)
class AdminDashboard:
    """Dashboard payload: totals, recent growth and preference breakdown."""

    totals: DashboardTotals
    new_users: int
    dietary_stats: dict[str, int]


@dataclass(frozen=True)
class UserPage:
    """A page of user profiles, newest first."""

    items: list[UserProfile]
    total: int
    page: int
    pages: int


@dataclass(frozen=True)
class AdminAnalytics:
    """Daily activity series over a trailing window ending today."""

    time_range: str
    labels: list[str]
    user_growth: list[int]
    recipe_submissions: list[int]
    meal_plans_created: list[int]
    active_users: list[int]

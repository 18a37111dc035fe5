# mic_core/api/urls.py
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from mic_core.clients.api.views import ClientViewSet
from mic_core.exports.api.views import BackupView, IncidentLogExportView
from mic_core.iam.api.auth import (
    LoginView,
    LogoutView,
    PasswordResetConfirmView,
    PasswordResetRequestView,
    RefreshView,
)
from mic_core.iam.api.me import MeView
from mic_core.iam.api.session import SessionBootstrapView
from mic_core.iam.api.users import CreateUserView, ResetPasswordView, UserListView, UserRoleView
from mic_core.incidents.api.dashboard import AnalyticsView, DashboardTodayView
from mic_core.incidents.api.views import IncidentLogViewSet, IncidentTypeViewSet
from mic_core.statistics.api.views import DailyTotalsView, MonthlySummaryView, StatisticsView

router = DefaultRouter()

router.register(r"incident-logs", IncidentLogViewSet, basename="incident-logs")
router.register(r"incident-types", IncidentTypeViewSet, basename="incident-types")
router.register(r"clients", ClientViewSet, basename="clients")

urlpatterns = [
    # Auth + /me + session bootstrap
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/password-reset/", PasswordResetRequestView.as_view(), name="password-reset"),
    path("auth/password-reset/confirm/", PasswordResetConfirmView.as_view(), name="password-reset-confirm"),
    path("me/", MeView.as_view(), name="me"),
    path("session/bootstrap/", SessionBootstrapView.as_view(), name="session-bootstrap"),

    # Privileged user administration
    path("users/", UserListView.as_view(), name="users"),
    path("users/create/", CreateUserView.as_view(), name="users-create"),
    path("users/reset-password/", ResetPasswordView.as_view(), name="users-reset-password"),
    path("users/<int:user_id>/role/", UserRoleView.as_view(), name="users-role"),

    # Dashboard + personal analytics
    path("dashboard/today/", DashboardTodayView.as_view(), name="dashboard-today"),
    path("analytics/", AnalyticsView.as_view(), name="analytics"),

    # Aggregates
    path("daily-totals/", DailyTotalsView.as_view(), name="daily-totals"),
    path("monthly-summary/", MonthlySummaryView.as_view(), name="monthly-summary"),
    path("statistics/", StatisticsView.as_view(), name="statistics"),

    # Exports
    path("exports/incident-logs/", IncidentLogExportView.as_view(), name="export-incident-logs"),
    path("exports/backup/", BackupView.as_view(), name="export-backup"),

    path("", include(router.urls)),
]

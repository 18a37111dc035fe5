# mic_core/common/permissions.py

from __future__ import annotations

from rest_framework.permissions import BasePermission, SAFE_METHODS

# Role values as stored on UserProfile.role
ROLE_MEDEWERKER = "medewerker"
ROLE_SUPER_ADMIN = "super_admin"

ALL_ROLES = frozenset({ROLE_MEDEWERKER, ROLE_SUPER_ADMIN})

ROLE_CHOICES = [
    (ROLE_MEDEWERKER, "Medewerker"),
    (ROLE_SUPER_ADMIN, "Super admin"),
]


def user_role(request) -> str | None:
    """
    Resolve the caller's role once per request.

    - Anonymous -> None
    - Django superuser -> super_admin
    - Otherwise the profile role resolution chain, which never fails and
      never escalates (worst case: medewerker).
    """
    cached = getattr(request, "mic_role", None)
    if cached:
        return cached

    user = getattr(request, "user", None)
    if not user or not getattr(user, "is_authenticated", False):
        return None

    if getattr(user, "is_superuser", False):
        role = ROLE_SUPER_ADMIN
    else:
        from mic_core.iam.services.role_resolution import resolve_role

        role = resolve_role(user.id)

    setattr(request, "mic_role", role)
    return role


def is_super_admin(request) -> bool:
    return user_role(request) == ROLE_SUPER_ADMIN


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    - Requires authentication.
    - super_admin bypass.
    - Uses allowed_roles_per_action for everything else.
    - If action is unknown and request is SAFE, fall back to list/retrieve.
    """
    message = "Toegang geweigerd."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action = {
        "list": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "retrieve": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "create": {ROLE_SUPER_ADMIN},
        "update": {ROLE_SUPER_ADMIN},
        "partial_update": {ROLE_SUPER_ADMIN},
        "destroy": {ROLE_SUPER_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        role = user_role(request)
        if role is None:
            return False

        if role == ROLE_SUPER_ADMIN:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            allowed = self.allowed_roles_per_action.get("retrieve" if is_detail else "list")

        if allowed is not None:
            return role in allowed

        # Unknown action => deny by default
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class RequiredRolePermission(BasePermission):
    """
    For plain APIViews: the view declares `required_role`.
    No required_role means any authenticated role may pass.
    super_admin passes every check.
    """
    message = "Toegang geweigerd."

    def has_permission(self, request, view) -> bool:
        role = user_role(request)
        if role is None:
            return False

        required = getattr(view, "required_role", None)
        if required is None or role == ROLE_SUPER_ADMIN:
            return True
        return role == required


class ReferenceDataPermission(BaseRolePermission):
    """Clients and incident types: everyone reads, super_admin writes."""
    allowed_roles_per_action = {
        "list": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "retrieve": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "create": {ROLE_SUPER_ADMIN},
        "update": {ROLE_SUPER_ADMIN},
        "partial_update": {ROLE_SUPER_ADMIN},
        "destroy": set(),
    }


class IncidentLogPermission(BaseRolePermission):
    """Every staff member registers incidents; ownership is checked in the service layer."""
    allowed_roles_per_action = {
        "list": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "retrieve": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "create": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "partial_update": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "destroy": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "group_update_count": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
        "group_delete": {ROLE_MEDEWERKER, ROLE_SUPER_ADMIN},
    }

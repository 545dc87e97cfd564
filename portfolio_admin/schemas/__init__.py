"""Schema package – re-exports all public symbols for convenient imports."""

from __future__ import annotations

from portfolio_admin.schemas.content import (
    ICON_GLYPHS,
    CvStatus,
    LoginIn,
    Message,
    Session,
    Skill,
    SkillIcon,
    UserProfile,
    icon_glyph,
    resolve_icon,
)
from portfolio_admin.schemas.project import (
    HealthOut,
    ProgressOut,
    Project,
    ProjectCreate,
    ProjectPatch,
    ReorderIn,
    ReorderOut,
    StoreStateOut,
)

__all__ = [
    "ICON_GLYPHS",
    "CvStatus",
    "HealthOut",
    "LoginIn",
    "Message",
    "ProgressOut",
    "Project",
    "ProjectCreate",
    "ProjectPatch",
    "ReorderIn",
    "ReorderOut",
    "Session",
    "Skill",
    "SkillIcon",
    "StoreStateOut",
    "UserProfile",
    "icon_glyph",
    "resolve_icon",
]

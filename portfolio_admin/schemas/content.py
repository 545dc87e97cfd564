"""Schemas for the simple dashboard sections: skills, profile, CV, messages, auth."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SkillIcon(str, Enum):
    """Closed set of icons a skill can be rendered with."""

    CODE = "code"
    DATABASE = "database"
    SERVER = "server"
    LAYOUT = "layout"
    SMARTPHONE = "smartphone"
    CLOUD = "cloud"
    TERMINAL = "terminal"
    GIT_BRANCH = "git-branch"
    PALETTE = "palette"
    SHIELD = "shield"


# Terminal rendering for each icon; every member must have an entry.
ICON_GLYPHS: dict[SkillIcon, str] = {
    SkillIcon.CODE: "</>",
    SkillIcon.DATABASE: "[db]",
    SkillIcon.SERVER: "[srv]",
    SkillIcon.LAYOUT: "[ui]",
    SkillIcon.SMARTPHONE: "[app]",
    SkillIcon.CLOUD: "[cloud]",
    SkillIcon.TERMINAL: ">_",
    SkillIcon.GIT_BRANCH: "[git]",
    SkillIcon.PALETTE: "[css]",
    SkillIcon.SHIELD: "[sec]",
}

FALLBACK_ICON = SkillIcon.CODE


def resolve_icon(name: str | None) -> SkillIcon:
    """Map a stored icon name onto the closed enum, falling back to ``CODE``."""
    if not name:
        return FALLBACK_ICON
    try:
        return SkillIcon(name.strip().lower())
    except ValueError:
        return FALLBACK_ICON


def icon_glyph(icon: SkillIcon) -> str:
    return ICON_GLYPHS[icon]


class Skill(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    icon: str | None = None
    category: str = "general"
    level: str | None = None

    @property
    def resolved_icon(self) -> SkillIcon:
        return resolve_icon(self.icon)


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str = ""
    email: str = ""
    about: list[str] = Field(default_factory=list)
    photo: str = ""
    github: str = ""
    linkedin: str = ""


class Message(BaseModel):
    """A contact-form message; read-only from the dashboard."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""
    created_at: str | None = None


class CvStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    exists: bool = False
    filename: str | None = None
    uploaded_at: str | None = None


class LoginIn(BaseModel):
    email: str
    password: str


class Session(BaseModel):
    """Result of a successful login."""

    model_config = ConfigDict(extra="ignore")

    token: str
    user: UserProfile = Field(default_factory=UserProfile)

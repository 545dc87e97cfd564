"""Services package – re-exports the remote API client and its resources."""

from __future__ import annotations

from portfolio_admin.services.auth import AuthApi, TokenStore
from portfolio_admin.services.client import ApiError, PortfolioApiClient
from portfolio_admin.services.content import CvApi, MessagesApi, ProfileApi, SkillsApi
from portfolio_admin.services.projects import ProjectRepository, ProjectsApi

__all__ = [
    "ApiError",
    "AuthApi",
    "CvApi",
    "MessagesApi",
    "PortfolioApiClient",
    "ProfileApi",
    "ProjectRepository",
    "ProjectsApi",
    "SkillsApi",
    "TokenStore",
]

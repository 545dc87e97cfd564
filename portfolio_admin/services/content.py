"""Skills, profile, CV and messages endpoints.

Plain request wrappers: call the endpoint, validate the payload, raise
:class:`ApiError` on failure.
"""

from __future__ import annotations

from pathlib import Path

from portfolio_admin.schemas import CvStatus, Message, Skill, UserProfile
from portfolio_admin.services.client import ApiError, PortfolioApiClient, first_record


def _as_list(payload, key: str) -> list:
    """Accept a bare list or a list nested under ``key``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    raise ApiError(f"Unexpected {key} payload from server")


class SkillsApi:
    PATH = "/api/skills"

    def __init__(self, client: PortfolioApiClient):
        self.client = client

    def list_skills(self) -> list[Skill]:
        return [Skill.model_validate(s) for s in _as_list(self.client.get(self.PATH), "skills")]

    def create_skill(self, skill: Skill) -> Skill:
        payload = first_record(self.client.post(self.PATH, json=skill.model_dump(exclude_none=True)))
        return Skill.model_validate(payload or skill.model_dump())

    def update_skill(self, skill_id: str, skill: Skill) -> Skill:
        payload = first_record(
            self.client.put(f"{self.PATH}/{skill_id}", json=skill.model_dump(exclude_none=True))
        )
        return Skill.model_validate(payload or skill.model_dump())

    def delete_skill(self, skill_id: str) -> None:
        self.client.delete(f"{self.PATH}/{skill_id}")


class MessagesApi:
    PATH = "/api/messages"

    def __init__(self, client: PortfolioApiClient):
        self.client = client

    def list_messages(self) -> list[Message]:
        payload = self.client.get(self.PATH)
        return [Message.model_validate(m) for m in _as_list(payload, "messages")]

    def delete_message(self, message_id: str) -> None:
        self.client.delete(f"{self.PATH}/{message_id}")


class ProfileApi:
    PATH = "/api/auth/profile"

    def __init__(self, client: PortfolioApiClient):
        self.client = client

    def get_profile(self) -> UserProfile:
        payload = self.client.get(self.PATH)
        if isinstance(payload, dict) and isinstance(payload.get("user"), dict):
            payload = payload["user"]
        if not isinstance(payload, dict):
            raise ApiError("Unexpected profile payload from server")
        return UserProfile.model_validate(payload)

    def update_profile(self, profile: UserProfile) -> UserProfile:
        payload = first_record(self.client.put(self.PATH, json=profile.model_dump()))
        if isinstance(payload, dict) and isinstance(payload.get("user"), dict):
            payload = payload["user"]
        return UserProfile.model_validate(payload or profile.model_dump())


class CvApi:
    """The single CV PDF."""

    PATH = "/api/cv"

    def __init__(self, client: PortfolioApiClient):
        self.client = client

    def status(self) -> CvStatus:
        payload = self.client.get(f"{self.PATH}/status")
        return CvStatus.model_validate(payload or {})

    def upload(self, pdf_path: Path) -> CvStatus:
        pdf_path = Path(pdf_path)
        if pdf_path.suffix.lower() != ".pdf":
            raise ApiError(f"CV must be a PDF file: {pdf_path.name}")
        with open(pdf_path, "rb") as f:
            payload = self.client.post(
                f"{self.PATH}/upload", files={"cv": (pdf_path.name, f, "application/pdf")}
            )
        if isinstance(payload, dict):
            return CvStatus.model_validate({"exists": True, "filename": pdf_path.name, **payload})
        return CvStatus(exists=True, filename=pdf_path.name)

    def download(self, destination: Path) -> Path:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.client.get(self.PATH, raw=True))
        return destination

    def delete(self) -> None:
        self.client.delete(self.PATH)

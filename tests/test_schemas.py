"""
Tests for the pydantic schemas and the batch progress indicator.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from portfolio_admin.core.reorder import BatchProgress
from portfolio_admin.schemas import (
    ICON_GLYPHS,
    ProjectCreate,
    ProjectPatch,
    ReorderIn,
    ReorderOut,
    SkillIcon,
    icon_glyph,
    resolve_icon,
)
from portfolio_admin.schemas.content import FALLBACK_ICON
from tests.fakes import RecordingListener, make_project


class TestSkillIcons:
    def test_every_icon_has_a_glyph(self) -> None:
        assert set(ICON_GLYPHS) == set(SkillIcon)

    @pytest.mark.parametrize("name", [None, "", "lightning", "Rocket"])
    def test_unknown_names_fall_back(self, name) -> None:
        assert resolve_icon(name) is FALLBACK_ICON
        assert icon_glyph(resolve_icon(name)) == "</>"

    def test_case_and_whitespace_insensitive(self) -> None:
        assert resolve_icon(" Git-Branch ") is SkillIcon.GIT_BRANCH


class TestProjectSchemas:
    def test_create_rejects_unknown_status(self) -> None:
        with pytest.raises(ValidationError):
            ProjectCreate(title="X", status="abandoned")

    def test_create_ignores_unknown_fields(self) -> None:
        record = ProjectCreate(title="X", likes=12)
        assert not hasattr(record, "likes")

    def test_patch_payload_only_has_set_fields(self) -> None:
        assert ProjectPatch(title="New").payload() == {"title": "New"}

    def test_with_order_copies(self) -> None:
        project = make_project("a", 1)
        moved = project.with_order(4)
        assert moved.order == 4
        assert project.order == 1

    def test_reorder_in_aliases(self) -> None:
        body = ReorderIn.model_validate({"sourceIndex": 2})
        assert body.source_index == 2
        assert body.destination_index is None

    def test_reorder_out_serializes_camel_case(self) -> None:
        out = ReorderOut(status="noop", changed_ids=["a"])
        assert out.model_dump(by_alias=True)["changedIds"] == ["a"]


class TestBatchProgress:
    def test_start_then_finish(self) -> None:
        listener = RecordingListener()
        progress = BatchProgress(listener)
        progress.start("Saving order")
        assert progress.running
        progress.finish(True, "Project order updated")
        assert [s.stage for s in listener.states] == ["running", "done"]

    def test_second_finish_ignored(self) -> None:
        listener = RecordingListener()
        progress = BatchProgress(listener)
        progress.start("Saving order")
        progress.finish(False, "Failed")
        progress.finish(True, "late")
        assert listener.finishes == 1
        assert progress.state.stage == "error"

    def test_finish_without_start_is_ignored(self) -> None:
        listener = RecordingListener()
        BatchProgress(listener).finish(True, "nothing")
        assert listener.states == []

from pathlib import Path

import pytest

from jsxgraph.errors import InvalidPlanError
from jsxgraph.patch import (
    ChangePlan,
    MatchStatus,
    PatchEngine,
    apply_plan,
    load_plan,
    normalize_code,
    replace_exact,
)
from jsxgraph.types import StepStatus


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "Button.tsx").write_text(
        'export const Button = () => <button className="blue">Save</button>;\n', encoding="utf-8"
    )
    return tmp_path


class TestReplaceExact:
    """Test the exact-substring matching stage."""

    def test_replaces_first_occurrence_only(self):
        result = replace_exact("a b a", "a", "c")
        assert result.status == MatchStatus.APPLIED
        assert result.text == "c b a"
        assert result.error is None

    def test_not_found_carries_diagnostics(self):
        result = replace_exact("<div>\n  <span/>\n</div>", "<p/>", "<b/>")

        assert result.status == MatchStatus.NOT_FOUND
        assert result.text == "<div>\n  <span/>\n</div>"
        assert 'Old: "<p/>..."' in str(result.error)
        assert 'File starts with: "<div><span/></div>..."' in str(result.error)

    def test_normalize_code(self):
        assert normalize_code("  <div>\n   <span>a   b</span>\n</div>  ") == "<div><span>a b</span></div>"


class TestLoadPlan:
    """Test plan validation."""

    def test_valid_plan(self):
        plan = load_plan({"plan": [{"file": "a.tsx", "changes": [{"old": "x", "new": "y"}]}], "confidence": 0.9})

        assert isinstance(plan, ChangePlan)
        assert plan.plan[0].action == "modify"
        assert plan.plan[0].changes[0].new == "y"

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {"steps": []},
        {"plan": "not a list"},
        {"plan": [{"changes": []}]},
    ])
    def test_invalid_plans(self, payload):
        with pytest.raises(InvalidPlanError):
            load_plan(payload)


class TestPatchEngine:
    """Test applying change plans."""

    def test_missing_file_does_not_stop_later_steps(self, project: Path, formatter):
        plan = {"plan": [
            {"file": "src/Missing.tsx", "changes": [{"old": "a", "new": "b"}]},
            {"file": "src/Button.tsx", "changes": [{"old": 'className="blue"', "new": 'className="red"'}]},
        ]}

        report = PatchEngine(str(project), formatter).apply_plan(plan)

        assert [s.status for s in report.steps] == [StepStatus.SKIPPED, StepStatus.APPLIED]
        assert report.steps[0].error == "file not found"
        assert report.applied_steps == 1
        assert 'className="red"' in (project / "src" / "Button.tsx").read_text()

    def test_partial_step_is_formatted_and_written(self, project: Path, suffix_formatter):
        formatter = suffix_formatter
        plan = {"plan": [{"file": "src/Button.tsx", "changes": [
            {"old": "Save", "new": "Store"},
            {"old": "not in the file", "new": "x"},
            {"old": "", "new": "ignored"},
        ]}]}

        report = PatchEngine(str(project), formatter).apply_plan(plan)

        step = report.steps[0]
        assert step.status == StepStatus.PARTIAL
        assert (step.applied_changes, step.missed_changes) == (1, 2)
        assert step.formatted is True
        assert len(formatter.calls) == 1
        assert formatter.calls[0][1].endswith("Button.tsx")
        assert (project / "src" / "Button.tsx").read_text() == (
            'export const Button = () => <button className="blue">Store</button>;\n// formatted\n'
        )

    def test_step_with_no_matches_is_skipped(self, project: Path, formatter):
        report = PatchEngine(str(project), formatter).apply_plan(
            {"plan": [{"file": "src/Button.tsx", "changes": [{"old": "nope", "new": "x"}]}]}
        )

        assert report.steps[0].status == StepStatus.SKIPPED
        assert report.applied_steps == 0

    def test_formatter_failure_writes_unformatted_text(self, project: Path, failing_formatter):
        plan = {"plan": [{"file": "src/Button.tsx", "changes": [{"old": "Save", "new": "Store"}]}]}

        report = PatchEngine(str(project), failing_formatter).apply_plan(plan)

        assert report.steps[0].status == StepStatus.APPLIED
        assert report.steps[0].formatted is False
        assert (project / "src" / "Button.tsx").read_text() == (
            'export const Button = () => <button className="blue">Store</button>;\n'
        )

    def test_deletion_with_empty_new(self, project: Path, plain_formatter):
        plan = {"plan": [{"file": "src/Button.tsx", "changes": [{"old": ' className="blue"', "new": ""}]}]}

        PatchEngine(str(project), plain_formatter).apply_plan(plan)

        assert (project / "src" / "Button.tsx").read_text() == (
            "export const Button = () => <button>Save</button>;\n"
        )

    def test_dry_run_leaves_files_alone(self, project: Path, formatter):
        before = (project / "src" / "Button.tsx").read_text()
        plan = {"plan": [{"file": "src/Button.tsx", "changes": [{"old": "Save", "new": "Store"}]}]}

        report = PatchEngine(str(project), formatter).apply_plan(plan, dry_run=True)

        assert report.dry_run is True
        assert report.steps[0].status == StepStatus.APPLIED
        assert (project / "src" / "Button.tsx").read_text() == before
        assert formatter.calls == []

    def test_change_without_new_is_not_a_deletion(self, project: Path, formatter):
        before = (project / "src" / "Button.tsx").read_text()
        plan = {"plan": [{"file": "src/Button.tsx", "changes": [{"old": 'className="blue"'}]}]}

        report = PatchEngine(str(project), formatter).apply_plan(plan)

        step = report.steps[0]
        assert step.status == StepStatus.SKIPPED
        assert (step.applied_changes, step.missed_changes) == (0, 1)
        assert (project / "src" / "Button.tsx").read_text() == before

    def test_null_sides_only_skip_their_own_change(self, project: Path, plain_formatter):
        (project / "src" / "Title.tsx").write_text("export const Title = () => <h1>Hi</h1>;\n", encoding="utf-8")
        plan = {"plan": [
            {"file": "src/Button.tsx", "changes": [{"old": "Save", "new": "Store"}]},
            {"file": "src/Title.tsx", "changes": [
                {"old": "Hi", "new": None},
                {"old": None, "new": "x"},
                {"old": "<h1>", "new": "<h2>"},
            ]},
        ]}

        report = PatchEngine(str(project), plain_formatter).apply_plan(plan)

        assert [s.status for s in report.steps] == [StepStatus.APPLIED, StepStatus.PARTIAL]
        assert (report.steps[1].applied_changes, report.steps[1].missed_changes) == (1, 2)
        assert "Store" in (project / "src" / "Button.tsx").read_text()
        assert (project / "src" / "Title.tsx").read_text() == "export const Title = () => <h2>Hi</h1>;\n"

    def test_crlf_line_endings_are_kept(self, tmp_path: Path, plain_formatter):
        path = tmp_path / "Card.tsx"
        path.write_bytes(b'const a = <b className="x" />;\r\nconst c = 1;\r\n')
        plan = {"plan": [{"file": "Card.tsx", "changes": [{"old": 'className="x"', "new": 'className="y"'}]}]}

        PatchEngine(str(tmp_path), plain_formatter).apply_plan(plan)

        assert path.read_bytes() == b'const a = <b className="y" />;\r\nconst c = 1;\r\n'

    def test_module_level_apply_plan(self, project: Path):
        plan = {"plan": [{"file": "src/Button.tsx", "changes": [{"old": "Save", "new": "Store"}]}]}

        report = apply_plan(plan, project_root=str(project), dry_run=True)

        assert report.dry_run is True
        assert report.steps[0].status == StepStatus.APPLIED
        assert "Save" in (project / "src" / "Button.tsx").read_text()

    def test_invalid_plan_raises(self, project: Path, formatter):
        with pytest.raises(InvalidPlanError):
            PatchEngine(str(project), formatter).apply_plan({"plan": [{"changes": []}]})

    def test_report_to_dict(self, project: Path, plain_formatter):
        report = PatchEngine(str(project), plain_formatter).apply_plan({"plan": []})
        assert report.to_dict() == {"dry_run": False, "applied_steps": 0, "steps": []}

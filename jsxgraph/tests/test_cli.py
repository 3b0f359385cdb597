import json
from pathlib import Path

import pytest

from jsxgraph.main import main


class TestCli:
    """Test the command line entry point."""

    def test_inject_build_and_query(self, temp_project: Path, tmp_path: Path, capsys):
        index_path = tmp_path / "fingerprints.json"
        graph_path = tmp_path / "graph.json"

        main(["inject", str(temp_project), "--index", str(index_path)])
        injected = json.loads(capsys.readouterr().out)
        assert injected["markers_added"] == 7

        main(["build", str(temp_project), "--graph", str(graph_path)])
        built = json.loads(capsys.readouterr().out)
        assert built["failed_files"] == 0

        main(["show", "--graph", str(graph_path), "--stats"])
        stats = json.loads(capsys.readouterr().out)
        assert stats["nodes"]["element"] == 7

        button = next(r for r in injected["fingerprints"] if r["elementName"] == "button")
        main(["lookup", button["id"], "--index", str(index_path)])
        assert json.loads(capsys.readouterr().out) == button

        main(["context", button["id"], "rename the button", "--graph", str(graph_path)])
        context = capsys.readouterr().out
        assert context.startswith("User intent: rename the button\n\nMain element: <button")
        assert "Parent element: <main" in context

    def test_apply_dry_run(self, temp_project: Path, tmp_path: Path, capsys):
        plan_path = tmp_path / "plan.json"
        plan_path.write_text(json.dumps({"plan": [
            {"file": "src/App.tsx", "changes": [{"old": "Docs", "new": "Guide"}]},
        ]}), encoding="utf-8")
        before = (temp_project / "src" / "App.tsx").read_text()

        main(["apply", str(plan_path), "--project-root", str(temp_project), "--dry-run"])

        report = json.loads(capsys.readouterr().out)
        assert report["dry_run"] is True
        assert report["steps"][0]["status"] == "applied"
        assert (temp_project / "src" / "App.tsx").read_text() == before

    def test_errors_exit_non_zero(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            main(["lookup", "abc", "--index", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 1

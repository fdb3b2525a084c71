import json

from utils.copy_summary import CopySummaryCollector


def test_display_shows_stages_and_outcome(capsys):
    summary = CopySummaryCollector()
    summary.start_collection()
    summary.add_stage("Exported", "OK", "'Overview'", 0.25)
    summary.add_stage("Imported", "OK", "abc", 0.5)
    summary.end_collection(state="Imported", new_dashboard_id="abc",
                           viewer_url="https://t.live.example.com/#dashboard;id=abc")

    summary.display_table()

    out = capsys.readouterr().out
    assert "Exported" in out
    assert "https://t.live.example.com/#dashboard;id=abc" in out


def test_display_shows_error(capsys):
    summary = CopySummaryCollector()
    summary.start_collection(mode="DRY RUN")
    summary.add_stage("Failed", "FAILED", "APIError after Transformed: boom")
    summary.end_collection(state="Failed", error="boom")

    summary.display_table()

    out = capsys.readouterr().out
    assert "DRY RUN" in out
    assert "❌ boom" in out


def test_save_json_only_with_output_dir(tmp_path):
    assert CopySummaryCollector().save_json() is None

    summary = CopySummaryCollector(output_dir=str(tmp_path))
    summary.start_collection()
    summary.add_stage("Validated", "OK", "HTTP 204", 0.1)
    summary.end_collection(state="Validated")

    path = summary.save_json("summary.json")

    data = json.loads((tmp_path / "summary.json").read_text())
    assert path.endswith("summary.json")
    assert data["outcome"] == {"state": "Validated"}
    assert data["stages"][0]["detail"] == "HTTP 204"

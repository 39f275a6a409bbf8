"""
CLI command tests through Flask's test runner.
"""


def test_workspace_create_and_list(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["workspace", "create", "--key", "office-2024"])
    assert "Workspace created successfully" in result.output

    result = runner.invoke(args=["workspace", "create", "--key", "office-2024"])
    assert "already in use" in result.output

    result = runner.invoke(args=["workspace", "list"])
    assert "Found 1 workspace(s)" in result.output
    assert "FTM Ticket Management (ftm)" in result.output


def test_custom_workspace_requires_org(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["workspace", "create", "--key", "acme", "--custom"])
    assert "--org is required" in result.output

    result = runner.invoke(
        args=["workspace", "create", "--key", "acme", "--custom", "--org", "Acme Corp",
              "--team", "broncos"]
    )
    assert "Teams: broncos" in result.output


def test_seed_and_export(app, tmp_path):
    runner = app.test_cli_runner()
    runner.invoke(args=["workspace", "create", "--key", "office-2024"])

    result = runner.invoke(args=["seed", "demo", "--key", "office-2024", "--events", "3",
                                 "--seed", "7"])
    assert result.exit_code == 0

    result = runner.invoke(
        args=["export", "all", "--key", "office-2024", "--output-dir", str(tmp_path)]
    )
    assert result.exit_code == 0
    exported = sorted(p.name.split("_")[-3] for p in tmp_path.iterdir())
    assert exported == ["assignments", "events", "people", "requests", "tickets"]
    events_file = next(p for p in tmp_path.iterdir() if "_events_" in p.name)
    assert len(events_file.read_text(encoding="utf-8").splitlines()) == 4


def test_unknown_workspace(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["seed", "demo", "--key", "missing"])
    assert "not found" in result.output
    result = runner.invoke(args=["workspace", "refresh-catalog", "--key", "missing"])
    assert "not found" in result.output

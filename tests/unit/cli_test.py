"""Tests for the pdb-gitlink command line."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pdb_gitlink.cli.app import app
from pdb_gitlink.models import LinkMethod, LinkOptions, LinkResult

runner = CliRunner()


@pytest.mark.parametrize(
    "args",
    [[], ["link"], ["providers"], ["show-url"]],
    ids=["root", "link", "providers", "show-url"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


class TestLinkCommand:
    def test_passes_options(self, tmp_path: Path) -> None:
        pdb = tmp_path / "app.pdb"
        with patch(
            "pdb_gitlink.cli.link.link_pdb",
            return_value=LinkResult(success=True, indexed=2, total=3),
        ) as mock_link:
            result = runner.invoke(
                app,
                [
                    "link",
                    str(pdb),
                    "--git-dir",
                    str(tmp_path),
                    "--commit",
                    "abc123",
                    "--url",
                    "https://github.com/acme/widgets",
                    "--skip-verify",
                    "--method",
                    "powershell",
                ],
            )

        assert result.exit_code == 0
        assert "2/3 files" in result.output
        mock_link.assert_called_once()
        called_pdb, options = mock_link.call_args[0]
        assert called_pdb == pdb
        assert options == LinkOptions(
            git_working_directory=tmp_path,
            commit_id="abc123",
            git_remote_url="https://github.com/acme/widgets",
            skip_verify=True,
            method=LinkMethod.POWERSHELL,
        )

    def test_links_every_pdb_and_fails_if_any_fails(self, tmp_path: Path) -> None:
        results = [
            LinkResult(success=False, error="Unable to detect the remote git service."),
            LinkResult(success=True, indexed=1, total=1),
        ]
        with patch("pdb_gitlink.cli.link.link_pdb", side_effect=results) as mock_link:
            result = runner.invoke(app, ["link", str(tmp_path / "a.pdb"), str(tmp_path / "b.pdb")])

        assert result.exit_code == 1
        assert mock_link.call_count == 2
        assert "Unable to detect the remote git service." in result.output


class TestProvidersCommand:
    def test_lists_providers(self) -> None:
        result = runner.invoke(app, ["providers"])
        assert result.exit_code == 0
        for name in ("github", "bitbucket", "gitlab", "azure-devops", "custom"):
            assert name in result.output


class TestShowUrlCommand:
    def test_known_provider(self) -> None:
        result = runner.invoke(app, ["show-url", "git@github.com:acme/widgets.git"])
        assert result.exit_code == 0
        assert "github" in result.output
        assert "https://raw.githubusercontent.com/acme/widgets/<revision>/<filename>" in result.output

    def test_metadata_provider(self) -> None:
        result = runner.invoke(app, ["show-url", "https://dev.azure.com/contoso/Fabrikam/_git/Widgets"])
        assert result.exit_code == 0
        assert "TFS_TEAM_PROJECT=Fabrikam" in result.output

    def test_unknown_url(self) -> None:
        result = runner.invoke(app, ["show-url", "/srv/git/widgets.git"])
        assert result.exit_code == 1
        assert "No provider recognises" in result.output

    def test_partial_template(self) -> None:
        result = runner.invoke(app, ["show-url", "https://example.com/{revision}"])
        assert result.exit_code == 1
        assert "both a revision and a filename" in result.output

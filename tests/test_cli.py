from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from api_catalog.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliConsole:
    def test_console_with_samples(self):
        runner = CliRunner()
        result = runner.invoke(main, ["console"], input="list\nquit\n")
        assert result.exit_code == 0
        assert "Total APIs:  2" in result.output
        assert "List Users" in result.output
        assert "Create User" in result.output

    def test_console_create_and_stats(self):
        runner = CliRunner()
        script = "\n".join([
            "new name List Users",
            "new endpoint /api/users",
            "new description desc",
            "create",
            "stats",
        ]) + "\n"
        result = runner.invoke(main, ["console", "--empty"], input=script)
        assert result.exit_code == 0
        assert "Total APIs:  0" in result.output
        assert "API created successfully" in result.output
        assert "Total APIs:  1" in result.output

    def test_console_empty_name_rejected(self):
        runner = CliRunner()
        script = "new endpoint /x\nnew description desc\ncreate\nstats\n"
        result = runner.invoke(main, ["console", "--empty"], input=script)
        assert result.exit_code == 0
        assert "Please fill in all required fields" in result.output
        assert "Total APIs:  1" not in result.output

    def test_console_seed_skips_invalid(self):
        runner = CliRunner()
        result = runner.invoke(main, ["console", "--seed", str(FIXTURES / "invalid_catalog.yaml")], input="quit\n")
        assert result.exit_code == 0
        assert "Skipped 3 invalid entries." in result.output
        assert "Total APIs:  1" in result.output

    @patch("api_catalog.cli.Shell")
    def test_console_passes_seed_descriptors(self, MockShell):
        runner = CliRunner()
        result = runner.invoke(main, ["console", "--seed", str(FIXTURES / "catalog.yaml")])
        assert result.exit_code == 0
        console = MockShell.call_args.args[0]
        assert [d.name for d in console.descriptors] == ["List Pets", "Create Pet", "Delete Pet"]
        MockShell.return_value.run.assert_called_once()


class TestCliValidate:
    def test_valid_catalog(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(FIXTURES / "catalog.yaml")])
        assert result.exit_code == 0
        assert "Checked 3 APIs" in result.output
        assert "All APIs are valid." in result.output

    def test_invalid_catalog(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(FIXTURES / "invalid_catalog.yaml")])
        assert result.exit_code == 1
        assert "#2 Broken: invalid" in result.output
        assert "missing_leading_slash" in result.output
        assert "duplicate_id" in result.output

    def test_malformed_file(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("apis: [unclosed")
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(bad)])
        assert result.exit_code == 1
        assert "not valid YAML/JSON" in result.output


class TestCliShow:
    def test_show_all(self):
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(FIXTURES / "catalog.yaml")])
        assert result.exit_code == 0
        assert "Total APIs:  3" in result.output
        assert "/pets/{petId}" in result.output

    def test_show_filtered(self):
        runner = CliRunner()
        result = runner.invoke(main, ["show", str(FIXTURES / "catalog.yaml"), "--filter", "POST /pets"])
        assert result.exit_code == 0
        assert "Total APIs:  1" in result.output
        assert "Create Pet" in result.output
        assert "List Pets" not in result.output


class TestCliCheckEndpoint:
    def test_valid_endpoint(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check-endpoint", "/api/users", "--method", "POST"])
        assert result.exit_code == 0
        assert "POST /api/users is a valid endpoint" in result.output

    def test_invalid_endpoint(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check-endpoint", "api/users"])
        assert result.exit_code == 1
        assert "is not a valid endpoint" in result.output

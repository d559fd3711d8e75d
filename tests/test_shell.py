import click
import pytest

from api_catalog.console.actions import Console
from api_catalog.console.shell import Shell
from api_catalog.schema.base import APIDescriptor


@pytest.fixture
def shell():
    output: list[str] = []
    descriptors = [
        APIDescriptor(id="a", name="List Users", endpoint="/api/users", method="GET", description="desc"),
    ]
    sh = Shell(Console.with_descriptors(descriptors), echo=lambda text="": output.append(click.unstyle(text)))
    sh.output = output
    return sh


def _run(shell: Shell, *lines: str) -> str:
    for line in lines:
        shell.execute(line)
    return "\n".join(shell.output)


class TestShell:
    def test_create_flow(self, shell):
        out = _run(
            shell,
            "new name Create User",
            "new endpoint /api/users",
            "new method post",
            "new description Create a user",
            "param name username",
            "param required yes",
            "param-add",
            "create",
        )
        assert "Parameter added successfully" in out
        assert "API created successfully" in out
        created = shell.console.descriptors[-1]
        assert created.name == "Create User"
        assert created.method == "POST"
        assert created.parameters[0].required is True

    def test_create_with_missing_fields(self, shell):
        out = _run(shell, "new name Only name", "create")
        assert "Please fill in all required fields" in out
        assert len(shell.console.descriptors) == 1

    def test_edit_flow(self, shell):
        out = _run(shell, "edit a", "set method POST", "save")
        assert "Editing API [a]" in out
        assert "API updated successfully" in out
        assert shell.console.find("a").method == "POST"
        assert not shell.console.is_editing

    def test_response_example_line_breaks(self, shell):
        _run(shell, 'new response_example {\\n  "ok": true\\n}')
        assert shell.console.state.new_draft.response_example == '{\n  "ok": true\n}'

    def test_list_filter_and_show(self, shell):
        out = _run(shell, 'list "POST /api/*"')
        assert out.endswith("No APIs defined.")
        out = _run(shell, 'list "GET /api/*"')
        assert out.endswith("[a]")
        out = _run(shell, "show a")
        assert "List Users" in out

    def test_list_bad_quoting(self, shell):
        out = _run(shell, 'list "GET /api')
        assert "Bad pattern" in out

    def test_delete(self, shell):
        out = _run(shell, "delete a")
        assert "API deleted successfully" in out
        assert shell.console.descriptors == []

    def test_export(self, shell):
        out = _run(shell, "export")
        assert "apis:" in out
        assert "endpoint: /api/users" in out

    def test_check(self, shell):
        assert "is a valid endpoint" in _run(shell, "check /api/users GET")
        assert "is not a valid endpoint" in _run(shell, "check users")

    def test_usage_and_unknown(self, shell):
        out = _run(shell, "show", "frobnicate")
        assert "Usage: show ID" in out
        assert 'Unknown command: frobnicate. Type "help".' in out

    def test_quit(self, shell):
        assert shell.execute("quit") is False
        assert shell.execute("") is True

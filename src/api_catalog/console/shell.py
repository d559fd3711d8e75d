"""Interactive command shell over the console actions."""

import asyncio
import shlex

import click

from api_catalog.catalog_file import dump_catalog
from api_catalog.console import render
from api_catalog.console.actions import Console

HELP = """Commands:
  stats                     show the dashboard
  list [PATTERN...]         list APIs, optionally filtered ("GET /api/*", "/api/users")
  show ID                   show one API in full
  new FIELD VALUE           set a field of the new API form
  create                    create an API from the new API form
  edit ID                   start editing an API
  set FIELD VALUE           set a field of the API being edited
  save                      save the API being edited
  cancel                    stop editing without saving
  delete ID                 delete an API
  param FIELD VALUE         set a field of the parameter form
  param-add                 add the parameter to the active form
  param-rm ID               remove a parameter from the active form
  draft                     show the active forms
  export                    print the catalog as YAML
  check ENDPOINT [METHOD]   check an endpoint path
  help                      show this help
  quit                      leave the console

API fields: name endpoint method description response_example version tags status
Parameter fields: name type required description default_value validation
Use \\n in response_example for line breaks."""


def _field_and_value(rest: str) -> tuple[str, str]:
    name, _, value = rest.partition(" ")
    if name == "response_example":
        value = value.replace("\\n", "\n")
    return name, value


class Shell:
    """Reads commands, runs console actions, echoes their notices."""

    def __init__(self, console: Console, echo=click.echo):
        self.console = console
        self.echo = echo
        self.commands = {
            "help": self.do_help,
            "stats": self.do_stats,
            "list": self.do_list,
            "show": self.do_show,
            "new": self.do_new,
            "create": self.do_create,
            "edit": self.do_edit,
            "set": self.do_set,
            "save": self.do_save,
            "cancel": self.do_cancel,
            "delete": self.do_delete,
            "param": self.do_param,
            "param-add": self.do_param_add,
            "param-rm": self.do_param_rm,
            "draft": self.do_draft,
            "export": self.do_export,
            "check": self.do_check,
        }

    def run(self) -> None:
        self.echo(render.render_stats(self.console.stats()))
        self.echo('Type "help" for commands.')
        while True:
            try:
                line = click.prompt("api-catalog", default="", show_default=False, prompt_suffix="> ")
            except click.Abort:
                break
            if not self.execute(line):
                break

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        line = line.strip()
        if not line:
            return True
        command, _, rest = line.partition(" ")
        rest = rest.strip()
        if command in ("quit", "exit"):
            return False

        handler = self.commands.get(command)
        if handler is None:
            self.console.notices.error(f'Unknown command: {command}. Type "help".')
        else:
            handler(rest)
        self.flush_notices()
        return True

    def flush_notices(self) -> None:
        for notice in self.console.notices.drain():
            self.echo(render.render_notice(notice))

    def _require(self, rest: str, usage: str) -> bool:
        if not rest:
            self.console.notices.error(f"Usage: {usage}")
            return False
        return True

    def do_help(self, rest: str) -> None:
        self.echo(HELP)

    def do_stats(self, rest: str) -> None:
        self.echo(render.render_stats(self.console.stats()))

    def do_list(self, rest: str) -> None:
        try:
            patterns = shlex.split(rest)
        except ValueError as e:
            self.console.notices.error(f"Bad pattern: {e}")
            return
        self.echo(render.render_list(self.console.filter(patterns)))

    def do_show(self, rest: str) -> None:
        if not self._require(rest, "show ID"):
            return
        descriptor = self.console.find(rest)
        if descriptor is None:
            self.console.notices.error(f"No API with id {rest}")
            return
        self.echo(render.render_descriptor(descriptor))

    def do_new(self, rest: str) -> None:
        if self._require(rest, "new FIELD VALUE"):
            self.console.set_new_field(*_field_and_value(rest))

    def do_create(self, rest: str) -> None:
        asyncio.run(self.console.create_descriptor())

    def do_edit(self, rest: str) -> None:
        if self._require(rest, "edit ID"):
            self.console.start_edit(rest)
            if self.console.is_editing:
                self.echo(render.render_forms(self.console.state))

    def do_set(self, rest: str) -> None:
        if self._require(rest, "set FIELD VALUE"):
            self.console.set_edit_field(*_field_and_value(rest))

    def do_save(self, rest: str) -> None:
        asyncio.run(self.console.save_edit())

    def do_cancel(self, rest: str) -> None:
        self.console.cancel_edit()

    def do_delete(self, rest: str) -> None:
        if self._require(rest, "delete ID"):
            asyncio.run(self.console.delete_descriptor(rest))

    def do_param(self, rest: str) -> None:
        if self._require(rest, "param FIELD VALUE"):
            self.console.set_parameter_field(*_field_and_value(rest))

    def do_param_add(self, rest: str) -> None:
        self.console.add_parameter()

    def do_param_rm(self, rest: str) -> None:
        if self._require(rest, "param-rm ID"):
            self.console.delete_parameter(rest)

    def do_draft(self, rest: str) -> None:
        self.echo(render.render_forms(self.console.state))

    def do_export(self, rest: str) -> None:
        self.echo(dump_catalog(self.console.descriptors).rstrip())

    def do_check(self, rest: str) -> None:
        if not self._require(rest, "check ENDPOINT [METHOD]"):
            return
        endpoint, _, method = rest.partition(" ")
        method = (method.strip() or "GET").upper()
        if asyncio.run(self.console.service.validate_endpoint(endpoint, method)):
            self.console.notices.success(f"{method} {endpoint} is a valid endpoint")
        else:
            self.console.notices.error(f"{method} {endpoint} is not a valid endpoint")

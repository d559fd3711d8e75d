"""Text rendering for the console. Functions return strings; callers echo them."""

from collections.abc import Iterable

import click

from api_catalog.console.actions import CatalogStats
from api_catalog.console.notices import Notice
from api_catalog.console.state import ConsoleState, DescriptorDraft, Editing, ParameterDraft
from api_catalog.schema.base import APIDescriptor, APIParameter
from api_catalog.schema.validate import FieldViolation

METHOD_COLORS = {
    "GET": "green",
    "POST": "blue",
    "PUT": "yellow",
    "DELETE": "red",
}

NOTICE_COLORS = {
    "success": "green",
    "error": "red",
}


def method_badge(method: str) -> str:
    return click.style(f"{method:<6}", fg=METHOD_COLORS.get(method), bold=True)


def render_stats(stats: CatalogStats) -> str:
    methods = "  ".join(f"{m} {n}" for m, n in stats.by_method.items())
    statuses = "  ".join(f"{s} {n}" for s, n in stats.by_status.items())
    return "\n".join([
        click.style("Dashboard", bold=True),
        f"  Total APIs:  {stats.total}",
        f"  Parameters:  {stats.parameters}",
        f"  By method:   {methods}",
        f"  By status:   {statuses}",
    ])


def render_parameter(param: APIParameter) -> str:
    line = f"{param.name} ({param.type})"
    if param.required:
        line += " " + click.style("required", fg="red")
    if param.default_value:
        line += f" default={param.default_value}"
    if param.validation:
        line += f" rule={param.validation}"
    if param.description:
        line += f" - {param.description}"
    return line


def render_parameters(params: Iterable[APIParameter], with_ids: bool = False) -> str:
    lines = []
    for p in params:
        prefix = f"[{p.id}] " if with_ids else ""
        lines.append(f"    {prefix}{render_parameter(p)}")
    return "\n".join(lines) if lines else "    (no parameters)"


def render_summary(descriptor: APIDescriptor) -> str:
    line = f"{method_badge(descriptor.method)} {descriptor.endpoint}  {descriptor.name}"
    meta = f"v{descriptor.version}, {descriptor.status}"
    if descriptor.tags:
        meta += ", tags: " + ", ".join(descriptor.tags)
    return f"{line}  ({meta})  [{descriptor.id}]"


def render_list(descriptors: Iterable[APIDescriptor]) -> str:
    lines = [render_summary(d) for d in descriptors]
    return "\n".join(lines) if lines else "No APIs defined."


def render_descriptor(descriptor: APIDescriptor) -> str:
    lines = [
        render_summary(descriptor),
        f"  {descriptor.description}",
        "  Parameters:",
        render_parameters(descriptor.parameters),
    ]
    if descriptor.response_example:
        lines.append("  Response example:")
        lines.extend(f"    {line}" for line in descriptor.response_example.splitlines())
    lines.append(f"  Created {descriptor.created_at}, updated {descriptor.updated_at}")
    return "\n".join(lines)


def render_draft(draft: DescriptorDraft, title: str) -> str:
    lines = [click.style(title, bold=True)]
    for name in ("name", "endpoint", "method", "description", "version", "status"):
        lines.append(f"  {name}: {getattr(draft, name) or '-'}")
    lines.append(f"  tags: {', '.join(draft.tags) or '-'}")
    lines.append(f"  response_example: {draft.response_example or '-'}")
    lines.append("  parameters:")
    lines.append(render_parameters(draft.parameters, with_ids=True))
    return "\n".join(lines)


def render_parameter_form(form: ParameterDraft) -> str:
    return (
        f"  parameter form: name={form.name or '-'} type={form.type} required={form.required} "
        f"default={form.default_value or '-'} rule={form.validation or '-'}"
    )


def render_forms(state: ConsoleState) -> str:
    if isinstance(state.focus, Editing):
        draft = render_draft(state.focus.draft, f"Editing API [{state.focus.descriptor_id}]")
    else:
        draft = render_draft(state.new_draft, "New API")
    return draft + "\n" + render_parameter_form(state.parameter_draft)


def render_notice(notice: Notice) -> str:
    return click.style(notice.message, fg=NOTICE_COLORS[notice.level])


def render_violations(violations: Iterable[FieldViolation]) -> str:
    return "\n".join(f"    {v.field}: {v.message} ({v.code})" for v in violations)

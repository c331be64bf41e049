"""proxyplane describe command - print the structural model of a class."""

import importlib
import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from proxyplane.config.models import ProxyPlaneConfig
from proxyplane.core.errors import ProxyPlaneError
from proxyplane.introspection.structure import StructuralModel, build_structural_model


def resolve_target(path: str) -> type:
    """Import ``module:Class`` (or ``module.Class``) and return the class."""
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise click.BadParameter(f"Expected 'module:Class', got '{path}'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import module '{module_name}': {e}") from e
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(f"'{module_name}' has no attribute '{attr_path}'") from e
    return obj  # type: ignore[no-any-return]


def model_to_dict(model: StructuralModel, *, include_dunder: bool = True) -> dict[str, Any]:
    intercepted = _intercepted_names(model, include_dunder)
    return {
        "type": model.type_id,
        "properties": [
            {
                "name": p.name,
                "declaring_type": p.declaring_type,
                "visibility": p.visibility.value,
                "storage": p.storage.value,
                "annotation": p.annotation,
                "nullable": p.nullable,
                "referenceable": p.referenceable,
                "can_be_unset": p.can_be_unset,
            }
            for p in model.properties
        ],
        "methods": [
            {
                "name": m.name,
                "declaring_type": m.declaring_type,
                "visibility": m.visibility.value,
                "parameters": [p.name for p in m.parameters],
                "returns_void": m.returns_void,
                "interceptable": m.name in intercepted,
            }
            for m in model.methods
        ],
    }


def _intercepted_names(model: StructuralModel, include_dunder: bool) -> set[str]:
    return {m.name for m in model.interceptable_methods(include_dunder=include_dunder)}


def _yes(flag: bool) -> str:
    return "yes" if flag else ""


def _properties_table(model: StructuralModel) -> Table:
    table = Table(title="Properties", title_justify="left", pad_edge=False)
    for column in ("name", "declared in", "visibility", "storage", "type", "nullable", "ref"):
        table.add_column(column)
    for p in model.properties:
        table.add_row(
            p.name,
            p.declaring_type,
            p.visibility.value,
            p.storage.value,
            p.annotation or "-",
            _yes(p.nullable),
            _yes(p.referenceable),
        )
    return table


def _methods_table(model: StructuralModel, include_dunder: bool) -> Table:
    intercepted = _intercepted_names(model, include_dunder)
    table = Table(title="Methods", title_justify="left", pad_edge=False)
    for column in ("name", "declared in", "visibility", "parameters", "void", "intercepted"):
        table.add_column(column)
    for m in model.methods:
        params = ", ".join(
            ("*" if p.variadic else "") + p.name + ("&" if p.by_reference else "")
            for p in m.parameters
        )
        table.add_row(
            m.name,
            m.declaring_type,
            m.visibility.value,
            params,
            _yes(m.returns_void),
            _yes(m.name in intercepted),
        )
    return table


@click.command()
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def describe_command(ctx: click.Context, target: str, as_json: bool) -> None:
    """Show how TARGET would be proxied.

    TARGET is an importable class, e.g. 'package.module:ClassName'.
    """
    config: ProxyPlaneConfig = (ctx.obj or {}).get("config") or ProxyPlaneConfig()
    include_dunder = config.proxy.intercept_dunder_methods
    cls = resolve_target(target)
    try:
        model = build_structural_model(cls)
    except ProxyPlaneError as e:
        if as_json:
            click.echo(json.dumps(e.to_dict()))
            raise SystemExit(1) from e
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(model_to_dict(model, include_dunder=include_dunder), indent=2))
        return

    console = Console()
    console.print(f"[bold]{model.type_id}[/bold]")
    console.print(_properties_table(model))
    console.print(_methods_table(model, include_dunder))

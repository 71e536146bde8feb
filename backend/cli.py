#!/usr/bin/env python3
"""
CLI for the typed routing API

Commands:
    serve   - Run the Flask development server
    routes  - List registered handler chains and their context fields

Usage:
    python cli.py serve --port 8000
    python cli.py routes
"""

import click

from api.routing import Chain

__version__ = "0.1.0"


def get_app():
    from app import create_app
    return create_app()


@click.group()
@click.version_option(version=__version__, prog_name="typed-routes")
def cli():
    """Typed routing API - development commands."""
    pass


@cli.command("serve")
@click.option("--host", default=None, help="Interface to bind (default: HOST config)")
@click.option("--port", type=int, default=None, help="Port to bind (default: PORT config)")
@click.option("--debug", is_flag=True, help="Enable the reloader and debugger")
def serve(host, port, debug):
    """Run the Flask development server."""
    app = get_app()
    host = host or app.config['HOST']
    port = port or app.config['PORT']
    click.echo(f"Serving on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug or app.config['DEBUG'])


@cli.command("routes")
def routes():
    """
    List handler chains.

    One line per chain: method, rule, handlers in order, and the context
    fields the chain requires and provides.
    """
    app = get_app()
    rows = []
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        view = app.view_functions.get(rule.endpoint)
        if not isinstance(view, Chain):
            continue
        methods = ",".join(sorted(m for m in rule.methods if m not in ("HEAD", "OPTIONS")))
        handlers = " -> ".join(getattr(h, '__name__', repr(h)) for h in view.handlers)
        rows.append((methods, rule.rule, handlers, view.requires, view.provides))

    if not rows:
        click.echo("No routes registered.")
        return

    for methods, path, handlers, required, provided in rows:
        line = f"{methods:<7} {path:<30} {handlers}"
        if required:
            line += f"  requires={','.join(sorted(required))}"
        if provided:
            line += f"  provides={','.join(sorted(provided))}"
        click.echo(line)


if __name__ == "__main__":
    cli()

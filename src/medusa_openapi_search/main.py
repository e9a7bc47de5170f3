"""Command-line interface for searching an OpenAPI operation catalog.

Loads an OpenAPI document, indexes its operations and lets you search the
catalog, inspect operation schemas, run the baseline evaluation queries or
serve the catalog to agents as MCP tools.
"""

import asyncio
import json
import sys
import traceback
from typing import Any, Dict, Optional, Sequence

import click
import yaml

from . import __version__
from .config.logging import configure_logging, get_logger
from .config.settings import Settings
from .parser.models import HttpMethod, Operation
from .parser.openapi_parser import OpenApiDocumentError
from .search.debug import format_detail
from .search.registry import OpenApiRegistry
from .server.exceptions import MCPServerError
from .server.tools import OpenApiTools

logger = get_logger(__name__)

# Queries used to eyeball ranking quality against the Medusa admin API
EVAL_QUERIES = [
    "create a draft order with items",
    "list payment collections",
    "cancel a fulfillment",
    "list regions with search",
    "update customer billing address",
    "archive a price list",
    "create a claim for return",
    "set inventory levels for variant",
    "publish a product",
    "generate draft order payment link",
    "list sales channels",
    "what is my most used shipping method",
    "What products with low inventory do I have",
    "What active promotions do I have",
]

METHOD_CHOICE = click.Choice([m.value for m in HttpMethod], case_sensitive=False)


class CLIError(Exception):
    """Base CLI error with user-friendly messages."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


class CLIContext:
    """Settings and registry loading shared by every command."""

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        config_file: Optional[str] = None,
    ):
        self.verbose = verbose
        self.quiet = quiet
        self.config_file = config_file
        self.settings = self.load_settings()

    def load_settings(self) -> Settings:
        """Build settings from the optional YAML file; environment fills the rest."""
        if not self.config_file:
            return Settings()

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise CLIError(
                f"Invalid configuration file: {e}",
                "Check YAML syntax and file format",
            ) from e

        if not isinstance(data, dict):
            raise CLIError(
                "Invalid configuration file: expected a mapping at the top level",
                "Use sections such as 'search:' and 'logging:'",
            )
        return Settings(**data)

    def load_registry(self, openapi_file: str) -> OpenApiRegistry:
        try:
            return OpenApiRegistry.from_file(openapi_file, self.settings.search)
        except OpenApiDocumentError as e:
            raise CLIError(str(e), e.suggestion) from e


def handle_cli_error(error: Exception, ctx: Optional[click.Context] = None):
    """Report an error and exit with status 1."""
    if isinstance(error, CLIError):
        click.echo(f"Error: {error.message}", err=True)
        if error.suggestion:
            click.echo(f"Suggestion: {error.suggestion}", err=True)
    elif isinstance(error, click.ClickException):
        error.show()
    else:
        verbose = bool(ctx and ctx.obj and ctx.obj.get("verbose"))
        click.echo(f"Unexpected error: {error}", err=True)
        if verbose:
            click.echo(traceback.format_exc(), err=True)
        else:
            click.echo("Run with --verbose for detailed error information", err=True)

    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="medusa-openapi-search")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file path (YAML format)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config: Optional[str]):
    """Search the operations of an OpenAPI document.

    \b
    Examples:
      medusa-openapi-search search oas.json "active promotions"
      medusa-openapi-search search oas.json "cancel fulfillment" --method post
      medusa-openapi-search schema oas.json AdminGetPromotions
      medusa-openapi-search serve oas.json
    """
    if verbose and quiet:
        raise click.BadParameter("Cannot use both --verbose and --quiet options")

    ctx.ensure_object(dict)
    try:
        cli_context = CLIContext(verbose=verbose, quiet=quiet, config_file=config)
    except CLIError as e:
        handle_cli_error(e, ctx)

    settings = cli_context.settings
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    else:
        level = settings.logging.level
    configure_logging(
        level=level,
        log_file=settings.logging.file_path,
        json_logs=settings.logging.json_format,
        enable_performance_logging=settings.logging.enable_performance,
    )

    ctx.obj["cli_context"] = cli_context
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


@cli.command()
@click.argument("openapi_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("query")
@click.option("--tag", "-t", "tags", multiple=True, help="Restrict to operations with this tag")
@click.option("--method", "-m", "methods", multiple=True, type=METHOD_CHOICE, help="Restrict to this HTTP method")
@click.option("--limit", "-l", type=click.IntRange(min=1), default=None, help="Maximum results")
@click.option("--explain", is_flag=True, help="Show the per-field score breakdown")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text")
@click.pass_context
def search(
    ctx: click.Context,
    openapi_file: str,
    query: str,
    tags: Sequence[str],
    methods: Sequence[str],
    limit: Optional[int],
    explain: bool,
    output_format: str,
):
    """Rank operations against a natural-language QUERY."""
    try:
        registry = ctx.obj["cli_context"].load_registry(openapi_file)
        hits = registry.search_scored(
            query, tags=list(tags), methods=list(methods), limit=limit
        )
    except CLIError as e:
        handle_cli_error(e, ctx)

    if output_format == "json":
        payload = []
        for hit in hits:
            entry = _operation_summary(hit.operation)
            entry["score"] = hit.score
            if explain:
                entry["details"] = [format_detail(detail) for detail in hit.details]
            payload.append(entry)
        click.echo(json.dumps(payload, indent=2))
        return

    if not hits:
        click.echo(f'No operations match "{query}"')
        return

    for rank, hit in enumerate(hits, start=1):
        click.echo(f"{rank:>2}. {hit.score:6.2f}  {_operation_line(hit.operation)}")
        if explain:
            click.echo(
                "        " + " | ".join(format_detail(detail) for detail in hit.details)
            )


@cli.command()
@click.argument("openapi_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("operation_id")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text")
@click.pass_context
def schema(ctx: click.Context, openapi_file: str, operation_id: str, output_format: str):
    """Show parameters and request body hints for OPERATION_ID."""
    try:
        cli_context = ctx.obj["cli_context"]
        registry = cli_context.load_registry(openapi_file)
        tools = OpenApiTools(registry, cli_context.settings.search)
        view = tools.get_operation_schema({"operationId": operation_id})
    except MCPServerError as e:
        suggestions = e.data.get("suggestions")
        handle_cli_error(
            CLIError(
                e.message,
                f"Did you mean: {', '.join(suggestions)}" if suggestions else None,
            ),
            ctx,
        )
    except CLIError as e:
        handle_cli_error(e, ctx)

    if output_format == "json":
        click.echo(json.dumps(view, indent=2, default=str))
        return

    click.echo(f"{view['operationId']}  {view['method'].upper()} {view['path']}")
    if view["summary"]:
        click.echo(f"  {view['summary']}")
    for label, key in (
        ("Path parameters", "pathParams"),
        ("Query parameters", "queryParams"),
        ("Header parameters", "headerParams"),
    ):
        if view[key]:
            click.echo(f"{label}:")
            for param in view[key]:
                required = " (required)" if param.get("required") else ""
                kind = f": {param['type']}" if param.get("type") else ""
                click.echo(f"  - {param['name']}{kind}{required}")
    if view["requiredBodyFields"]:
        click.echo("Required body fields: " + ", ".join(view["requiredBodyFields"]))
    if view["exampleUrl"]:
        click.echo(f"Example: {view['exampleUrl']}")


@cli.command(name="list")
@click.argument("openapi_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--tag", "-t", "tags", multiple=True, help="Only operations with this tag")
@click.option("--method", "-m", "methods", multiple=True, type=METHOD_CHOICE, help="Only this HTTP method")
@click.pass_context
def list_operations(
    ctx: click.Context, openapi_file: str, tags: Sequence[str], methods: Sequence[str]
):
    """List every indexed operation in document order."""
    try:
        registry = ctx.obj["cli_context"].load_registry(openapi_file)
    except CLIError as e:
        handle_cli_error(e, ctx)

    tag_filter = {tag.lower() for tag in tags}
    method_filter = {method.lower() for method in methods}
    for operation in registry.list():
        if tag_filter and not any(t.lower() in tag_filter for t in operation.tags):
            continue
        if method_filter and operation.method.value not in method_filter:
            continue
        click.echo(_operation_line(operation))


@cli.command(name="eval")
@click.argument("openapi_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--limit", "-l", type=click.IntRange(min=1), default=5, help="Results per query")
@click.pass_context
def evaluate(ctx: click.Context, openapi_file: str, limit: int):
    """Run the baseline query set and print the top results for each."""
    try:
        registry = ctx.obj["cli_context"].load_registry(openapi_file)
    except CLIError as e:
        handle_cli_error(e, ctx)

    for query in EVAL_QUERIES:
        click.echo(f"\n> {query}")
        hits = registry.search_scored(query, limit=limit)
        if not hits:
            click.echo("  (no matches)")
        for rank, hit in enumerate(hits, start=1):
            click.echo(f"  {rank}. {hit.score:6.2f}  {_operation_line(hit.operation)}")

    click.echo("\nBaseline run complete.")


@cli.command()
@click.argument("openapi_file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def serve(ctx: click.Context, openapi_file: Optional[str]):
    """Serve the catalog as MCP tools over stdio."""
    from .server.mcp_server import OpenApiSearchMcpServer

    cli_context = ctx.obj["cli_context"]
    path = openapi_file or cli_context.settings.server.openapi_path
    if not path:
        handle_cli_error(
            CLIError(
                "No OpenAPI document given",
                "Pass OPENAPI_FILE or set SERVER_OPENAPI_PATH",
            ),
            ctx,
        )

    try:
        registry = cli_context.load_registry(path)
        server = OpenApiSearchMcpServer(registry, cli_context.settings)
        asyncio.run(server.run_stdio())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except CLIError as e:
        handle_cli_error(e, ctx)


def _operation_line(operation: Operation) -> str:
    line = f"{operation.operation_id}  [{operation.method.value.upper()} {operation.path}]"
    summary = operation.summary or operation.description
    return f"{line} :: {summary}" if summary else line


def _operation_summary(operation: Operation) -> Dict[str, Any]:
    return {
        "operationId": operation.operation_id,
        "method": operation.method.value,
        "path": operation.path,
        "summary": operation.summary,
        "tags": list(operation.tags),
    }


if __name__ == "__main__":
    cli()

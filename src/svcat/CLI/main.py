"""
Command Line Interface for svcat.
"""
import logging
import click
from ..config import CatalogSettings
from ..CONVERTERS.to_report import SummaryReportConverter
from ..MANAGERS.service_registry import ServiceRegistry
from ..REGISTRY.config_store import FileConfigStore
from ..errors import CatalogError, InfrastructureError


def _registry(ctx) -> ServiceRegistry:
    """
    Builds the registry on first use and loads every stored service into it.
    """
    if 'registry' not in ctx.obj:
        settings = ctx.obj['settings']
        registry = ServiceRegistry(store=FileConfigStore(settings.config_dir), settings=settings)
        registry.load_services()
        ctx.obj['registry'] = registry
    return ctx.obj['registry']


def _fail(ctx, error):
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


@click.group()
@click.option('--config-dir', '-d', default=None, help='Directory holding service configurations')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config_dir, verbose):
    """
    svcat - service catalog.

    Validates service dependencies and computes start, stop and impact order.
    """
    ctx.ensure_object(dict)
    settings = CatalogSettings.from_env()
    if config_dir:
        settings = settings.model_copy(update={'config_dir': config_dir})
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')
    ctx.obj['settings'] = settings


@cli.command()
@click.argument('name')
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def register(ctx, name, config_file):
    """Register or update a service from a JSON or YAML file."""
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            content = f.read()
        record = _registry(ctx).register_service(name, content)
    except (CatalogError, InfrastructureError) as e:
        _fail(ctx, e)
    click.echo(f"Registered {record.name} (version {record.declared_version or 'unknown'}).")


@cli.command(name='list')
@click.pass_context
def list_services(ctx):
    """List registered services"""
    try:
        registry = _registry(ctx)
    except (CatalogError, InfrastructureError) as e:
        _fail(ctx, e)
    click.echo(f"{'SERVICE':25} {'VERSION':12} {'TYPE':12} DEPENDENCIES")
    click.echo("-" * 65)
    for record in registry.snapshot():
        deps = ", ".join(d.target + ("" if d.required else "?") for d in record.dependencies)
        click.echo(f"{record.name:25} {record.declared_version or '-':12} {record.service_type:12} {deps}")


@cli.command()
@click.option('--format', '-f', 'fmt', type=click.Choice(['text', 'json']), default='text')
@click.option('--output', '-o', default=None, help='Write the report to a file')
@click.pass_context
def validate(ctx, fmt, output):
    """Validate every service. Exits 1 if any service fails."""
    try:
        summary = _registry(ctx).validate_all_services()
    except (CatalogError, InfrastructureError) as e:
        _fail(ctx, e)
    converter = SummaryReportConverter(summary)
    if output:
        converter.convert(output, fmt)
        click.echo(f"Report written to {output}")
    else:
        click.echo(converter.render(fmt))
    if not summary.is_successful():
        ctx.exit(1)


@cli.command()
@click.pass_context
def cycles(ctx):
    """Report a circular dependency, if any.

    Cycles are advisory, as in validate: the exit status is 0 either way.
    """
    try:
        cycle = _registry(ctx).check_circular_dependencies()
    except (CatalogError, InfrastructureError) as e:
        _fail(ctx, e)
    if cycle is None:
        click.echo("No circular dependencies.")
    else:
        click.echo(f"Warning: circular dependency detected: {cycle.description}")


@cli.command()
@click.argument('services', nargs=-1, required=True)
@click.option('--stop', is_flag=True, help='Print stop order (dependents first)')
@click.pass_context
def order(ctx, services, stop):
    """Print start order (dependencies first) for services"""
    try:
        registry = _registry(ctx)
        names = registry.stop_order(services) if stop else registry.start_order(services)
    except (CatalogError, InfrastructureError) as e:
        _fail(ctx, e)
    for position, name in enumerate(names, 1):
        click.echo(f"{position:3}. {name}")


@cli.command()
@click.argument('service')
@click.option('--critical', is_flag=True, help='Only services that require SERVICE')
@click.option('--detailed', is_flag=True, help='Show how each service is reached')
@click.pass_context
def impact(ctx, service, critical, detailed):
    """Show services affected by a change to SERVICE"""
    try:
        registry = _registry(ctx)
        if detailed:
            for info in registry.analyze_impact_detailed(service):
                marker = "required" if info.is_required else "optional"
                click.echo(f"{info.service:25} {marker:9} {' <- '.join(info.path)}")
            return
        names = registry.analyze_critical_impact(service) if critical else registry.analyze_impact(service)
    except (CatalogError, InfrastructureError) as e:
        _fail(ctx, e)
    if not names:
        click.echo(f"No services depend on {service}.")
    for name in names:
        click.echo(name)


@cli.command()
@click.argument('service')
@click.option('--force', is_flag=True, help='Delete even if other services require it')
@click.pass_context
def delete(ctx, service, force):
    """Delete a service, refusing if others require it."""
    try:
        impacted = _registry(ctx).delete_service(service, force=force)
    except (CatalogError, InfrastructureError) as e:
        _fail(ctx, e)
    click.echo(f"Deleted {service}.")
    if impacted:
        click.echo(f"Impacted services: {', '.join(impacted)}")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()

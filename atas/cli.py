"""
Comandos CLI das atas.
Use com: flask <comando>
"""

import click
from flask import current_app
from flask.cli import with_appcontext


def init_app(app):
    """Registra os comandos CLI"""
    app.cli.add_command(reindex_cmd)
    app.cli.add_command(cleanup_temp_cmd)


@click.command("reindex")
@click.option("--dry-run", is_flag=True, help="Mostra as mudanças sem gravar a lista")
@with_appcontext
def reindex_cmd(dry_run):
    """
    Reconstrói a lista de formulários a partir dos documentos armazenados.

    Uso:
        flask reindex
        flask reindex --dry-run
    """
    if dry_run:
        click.echo("Modo dry-run: nenhuma alteração será feita")
        click.echo("-" * 50)

    results = current_app.extensions["form_service"].reindex(dry_run=dry_run)

    click.echo("Resultado:")
    click.echo(f"   Mantidos: {results['kept']}")
    click.echo(f"   Adicionados: {len(results['added'])}")
    for form_id in results["added"]:
        click.echo(f"     + {form_id}")
    click.echo(f"   Removidos: {len(results['removed'])}")
    for form_id in results["removed"]:
        click.echo(f"     - {form_id}")


@click.command("cleanup-temp")
@click.option(
    "--max-age-hours",
    default=24.0,
    type=float,
    show_default=True,
    help="Idade mínima dos arquivos removidos",
)
@with_appcontext
def cleanup_temp_cmd(max_age_hours):
    """Remove PDFs e ZIPs temporários antigos"""
    removed = current_app.extensions["report_service"].cleanup_stale(max_age_hours)
    click.echo(f"{len(removed)} arquivo(s) temporário(s) removido(s)")

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from db import fetch_batches, init_supabase, insert_creator_records, setup_logging
from services.aggregation import DashboardFilters, aggregate
from services.config import DashboardConfig
from services.errors import DashboardError
from services.ingest import parse_workbook_report
from utils import format_count, format_number
from validators import UploadForm, UploadValidator

# --- Setup logging once for CLI ---
setup_logging()
logger = logging.getLogger("dash_cli")


def _fail(message: str) -> None:
    raise click.ClickException(message)


def _connect_service_role() -> None:
    """Connect with the service-role key; exits when Supabase is not configured."""
    load_dotenv()
    if init_supabase(DashboardConfig.from_env(), service_role=True) is None:
        _fail("Failed to initialize Supabase client (check SUPABASE_SERVICE_ROLE_KEY).")


@click.group()
def cli():
    """Agency dashboard CLI for offline workbook checks and uploads."""


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--period", default="preview", show_default=True, help="Period label")
@click.option("--top", default=10, show_default=True, help="Creators to list")
def preview(file, period, top):
    """Parse a workbook locally and print what the dashboard would show."""
    try:
        report = parse_workbook_report(file.read_bytes(), period, "")
    except DashboardError as e:
        _fail(str(e))

    view = aggregate(report.records, DashboardFilters(), limit=top)
    summary = view.summary

    click.echo(f"📄 {file.name}: {report.row_count} rows")
    click.echo(
        f"💎 {format_number(summary.total_diamonds)}  "
        f"👥 {format_count(summary.total_creators)}  "
        f"🆕 {format_count(summary.new_creators)}  "
        f"➕ {format_number(summary.total_followers)}"
    )

    if view.group_rollups:
        click.echo("\nGroups:")
        for name, rollup in view.group_rollups:
            click.echo(
                f"  {name:<20} {format_count(rollup.count):>8} {format_number(rollup.diamonds):>10}"
            )

    if view.creator_view:
        click.echo(f"\nTop {len(view.creator_view)} creators:")
        for row in view.creator_view:
            record = row.record
            badge = " NEW" if row.is_new else ""
            click.echo(
                f"  {record.creator_username or record.creator_id:<24} "
                f"{format_number(record.diamonds):>10}{badge}"
            )

    if report.defaulted:
        click.echo("\nDefaulted cells:")
        for field_name, count in report.defaulted.items():
            click.echo(f"  {field_name}: {count}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--period", required=True, help="Period label, e.g. 12월1주")
@click.option("--agency-id", required=True, help="Target agency id")
@click.option("--dry-run", is_flag=True, help="Parse only, without writing to Supabase")
def upload(file, period, agency_id, dry_run):
    """Parse a workbook and insert it as one batch using service-role credentials."""
    form = UploadForm(period=period, agency_id=agency_id, filename=file.name)
    errors = UploadValidator.validate(form)
    if errors:
        _fail("; ".join(errors))

    try:
        report = parse_workbook_report(file.read_bytes(), form.period, form.agency_id)
    except DashboardError as e:
        _fail(str(e))

    if dry_run:
        logger.warning("Dry run: no DB writes will occur")
        click.echo(f"[DryRun] Would insert {report.row_count} rows")
        return

    _connect_service_role()
    try:
        inserted = insert_creator_records(None, report.records)
    except DashboardError as e:
        _fail(f"업로드 실패: {e}")
    click.echo(f"✅ {inserted}개 데이터 업로드 완료!")


@cli.command()
def batches():
    """List uploaded (period, agency) batches, most recent first."""
    _connect_service_role()
    try:
        found = fetch_batches(None)
    except DashboardError as e:
        _fail(str(e))

    if not found:
        click.echo("업로드된 데이터가 없습니다")
        return
    for batch in found:
        click.echo(
            f"{batch.period:<12} {batch.agency_name or batch.agency_id:<24} "
            f"{format_count(batch.count, '개')}"
        )


if __name__ == "__main__":
    cli()

"""
Dashboard controller: loads the store snapshot, aggregates it for the
selected filters and handles admin workbook uploads.
"""

import logging

from fasthtml.common import *

from components import ErrorAlert
from controllers.auth_routes import pop_flash, redirect_to_login, set_flash, verified_session
from db import (
    fetch_agencies,
    fetch_creator_data,
    fetch_profile,
    get_supabase,
    insert_creator_records,
)
from services.aggregation import aggregate, distinct_values, normalize_filters
from services.config import DashboardConfig
from services.errors import DashboardError, PersistenceError, ValidationError
from services.ingest import parse_workbook_report
from services.session import require_admin
from validators import UploadForm, UploadValidator
from views.dashboard import render_dashboard_page

logger = logging.getLogger(__name__)


def build_view(records, raw_filters: dict, config: DashboardConfig = None):
    """Normalize the query filters against the data and aggregate."""
    config = config or DashboardConfig.from_env()
    filters = normalize_filters(
        raw_filters,
        periods=distinct_values(r.period for r in records),
        groups=distinct_values(r.group_name for r in records),
    )
    return aggregate(
        records,
        filters,
        limit=config.creator_view_limit,
        new_days=config.new_creator_days,
    )


def dashboard_controller(sess, period: str = "", group: str = "", tab: str = ""):
    ctx = verified_session(sess)
    if ctx is None:
        return redirect_to_login()

    if get_supabase() is None:
        return Title("대시보드"), ErrorAlert(
            "서비스를 사용할 수 없습니다",
            "데이터베이스가 설정되지 않았습니다. 관리자에게 문의하세요.",
            type="warning",
            show_logout_link=True,
        )

    try:
        profile = fetch_profile(ctx)
        records = fetch_creator_data(ctx)
        agencies = (
            fetch_agencies(ctx, order_by_name=True)
            if profile is not None and profile.is_admin
            else []
        )
    except PersistenceError as e:
        logger.error(f"Dashboard load failed for {ctx.email}: {e}")
        return Title("대시보드"), ErrorAlert(
            "데이터를 불러오지 못했습니다", str(e), show_logout_link=True
        )

    view = build_view(records, {"period": period, "group": group})
    return render_dashboard_page(
        profile=profile,
        email=ctx.email,
        view=view,
        agencies=agencies,
        tab=tab,
        flash=pop_flash(sess),
    )


def upload_controller(
    sess, period: str, agency_id: str, filename: str, content: bytes
):
    """
    Validate, parse and insert an uploaded workbook, then return to the dashboard.

    Every outcome is reported through a flash message; nothing is inserted
    unless the whole workbook parsed.
    """
    ctx = verified_session(sess)
    if ctx is None:
        return redirect_to_login()
    back = RedirectResponse("/dashboard", status_code=303)

    try:
        require_admin(fetch_profile(ctx))

        form = UploadForm(period=period, agency_id=agency_id, filename=filename)
        errors = UploadValidator.validate(form)
        if errors:
            raise ValidationError(errors)

        report = parse_workbook_report(content, form.period, form.agency_id)
        inserted = insert_creator_records(ctx, report.records)
    except DashboardError as e:
        logger.warning(f"Upload by {ctx.email} failed: {e}")
        set_flash(sess, f"업로드 실패: {e}")
        return back

    logger.info(
        f"Upload by {ctx.email}: {inserted} rows, period={form.period}, "
        f"agency={form.agency_id}, defaulted={report.defaulted}"
    )
    set_flash(sess, f"{inserted}개 데이터 업로드 완료!", "success")
    return back

"""api/v1/endpoints/scouting_reports.py — Scouts' written assessments of talents.

Routes:
    GET    /scouting-reports               Own reports, or every report on ?talent_id= (SCOUT)
    POST   /scouting-reports               File a report (SCOUT)
    PUT    /scouting-reports/{id}          Edit one of own reports (SCOUT)
    DELETE /scouting-reports/{id}          Delete one of own reports (SCOUT)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response

from api.dependencies import get_scout_id, get_upstream
from client.api_client import ScoutingApiClient
from core.errors import AccessDenied
from schemas.scout import ScoutingReport, ScoutingReportForm

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_owner(client: ScoutingApiClient, report_id: int, scout_id: int) -> None:
    if client.get_scouting_report(report_id).scout_id != scout_id:
        raise AccessDenied("You can only change your own scouting reports")


@router.get("", response_model=list[ScoutingReport], summary="List scouting reports")
def list_reports(
    talent_id: int | None = Query(None, description="All reports on this talent"),
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    if talent_id is not None:
        reports = client.list_scouting_reports_by_talent(talent_id)
    else:
        reports = client.list_scouting_reports_by_scout(scout_id)
    return sorted(reports, key=lambda r: r.report_date, reverse=True)


@router.post("", response_model=ScoutingReport, status_code=201, summary="File scouting report")
def create_report(
    form: ScoutingReportForm,
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    report = client.create_scouting_report(form.to_upstream_for(scout_id))
    logger.info(
        "scouting report filed",
        extra={"scout_id": scout_id, "talent_id": report.talent_id, "report_id": report.id},
    )
    return report


@router.put("/{report_id}", response_model=ScoutingReport, summary="Edit scouting report")
def update_report(
    report_id: int,
    form: ScoutingReportForm,
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    _check_owner(client, report_id, scout_id)
    return client.update_scouting_report(report_id, form.to_upstream_for(scout_id))


@router.delete("/{report_id}", status_code=204, summary="Delete scouting report")
def delete_report(
    report_id: int,
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    _check_owner(client, report_id, scout_id)
    client.delete_scouting_report(report_id)
    logger.info("scouting report deleted", extra={"scout_id": scout_id, "report_id": report_id})
    return Response(status_code=204)

"""services/cascade.py — Delete a user together with everything hanging off it.

The upstream API does not cascade, so an admin delete walks the graph:

    1. scout profile of the user               → delete
    2. talent profile of the user
         a. its match-history records          → delete each
         b. its scouting reports               → delete each
         c. the talent                         → delete
    3. the user account                        → delete

A 404 in steps 1–2 means there is nothing to delete. Any other failure in
steps 1–2 is logged, recorded as a warning on the report, and the walk goes
on; a failure deleting the account itself is raised to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from client.api_client import ScoutingApiClient
from core.errors import PortalError, UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class CascadeReport:
    user_id: int
    scout_deleted: bool = False
    talent_deleted: bool = False
    match_history_deleted: int = 0
    scouting_reports_deleted: int = 0
    warnings: list[str] = field(default_factory=list)

    def warn(self, step: str, exc: PortalError) -> None:
        status = getattr(exc, "status_code", None)
        self.warnings.append(f"{step}: {exc.message or 'request failed'} ({status})")
        logger.warning(
            "cascade step failed",
            extra={"user_id": self.user_id, "step": step, "status_code": status, "error": exc.message},
        )


def _is_missing(exc: PortalError) -> bool:
    return isinstance(exc, UpstreamError) and exc.is_not_found


def _delete_scout(client: ScoutingApiClient, report: CascadeReport) -> None:
    try:
        scout = client.get_scout_by_user(report.user_id)
        client.delete_scout(scout.id)
        report.scout_deleted = True
        logger.info("scout profile deleted", extra={"user_id": report.user_id, "scout_id": scout.id})
    except PortalError as exc:
        if not _is_missing(exc):
            report.warn("scout profile", exc)


def _delete_match_history(client: ScoutingApiClient, talent_id: int, report: CascadeReport) -> None:
    try:
        for match in client.list_match_history_by_talent(talent_id):
            client.delete_match_history(match.id)
            report.match_history_deleted += 1
    except PortalError as exc:
        if not _is_missing(exc):
            report.warn("match history", exc)


def _delete_scouting_reports(client: ScoutingApiClient, talent_id: int, report: CascadeReport) -> None:
    try:
        for scouting_report in client.list_scouting_reports_by_talent(talent_id):
            client.delete_scouting_report(scouting_report.id)
            report.scouting_reports_deleted += 1
    except PortalError as exc:
        if not _is_missing(exc):
            report.warn("scouting reports", exc)


def _delete_talent(client: ScoutingApiClient, report: CascadeReport) -> None:
    try:
        talent = client.get_talent_by_user(report.user_id)
    except PortalError as exc:
        if not _is_missing(exc):
            report.warn("talent profile", exc)
        return

    _delete_match_history(client, talent.id, report)
    _delete_scouting_reports(client, talent.id, report)

    try:
        client.delete_talent(talent.id)
        report.talent_deleted = True
        logger.info("talent profile deleted", extra={"user_id": report.user_id, "talent_id": talent.id})
    except PortalError as exc:
        if not _is_missing(exc):
            report.warn("talent profile", exc)


def delete_user_cascade(client: ScoutingApiClient, user_id: int) -> CascadeReport:
    report = CascadeReport(user_id=user_id)

    _delete_scout(client, report)
    _delete_talent(client, report)

    client.delete_user(user_id)
    logger.info(
        "user deleted",
        extra={
            "user_id": user_id,
            "match_history_deleted": report.match_history_deleted,
            "scouting_reports_deleted": report.scouting_reports_deleted,
            "warnings": len(report.warnings),
        },
    )
    return report

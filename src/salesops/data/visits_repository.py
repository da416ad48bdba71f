"""Visit source: Supabase first, falling back to a CSV/XLSX export."""

from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from openpyxl import load_workbook

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import Visit
from ..services.geospatial import is_valid_coordinate

VISIT_COLUMNS = (
    "client_code",
    "customer_name_en",
    "customer_name_ar",
    "rep_code",
    "day_name",
    "week_number",
    "route_name",
    "district",
    "classification",
    "store_type",
    "branch_code",
    "lat",
    "lng",
    "visit_order",
)

ALL_BRANCHES = "All Branches"
ALL_WEEKS = "All Weeks"


@dataclass(slots=True)
class VisitFilters:
    branch_code: Optional[str] = None
    week: Optional[str] = None
    routes: list[str] = field(default_factory=list)

    @property
    def effective_branch(self) -> Optional[str]:
        if self.branch_code and self.branch_code != ALL_BRANCHES:
            return self.branch_code
        return None

    @property
    def effective_week(self) -> Optional[str]:
        if self.week and self.week != ALL_WEEKS:
            return str(self.week)
        return None


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", ""))
    except ValueError:
        return None


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_float(value)
    if number is None or not math.isfinite(number):
        return None
    return int(number)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def visit_from_row(row: Mapping[str, Any]) -> Visit:
    """Build a Visit from a backend/export row; unknown columns land in ``extra``."""

    extra = {
        str(key): "" if value is None else str(value)
        for key, value in row.items()
        if key not in VISIT_COLUMNS and key != "company_id"
    }
    week = row.get("week_number")
    if isinstance(week, float) and week.is_integer():
        week = int(week)
    return Visit(
        client_code=_text(row.get("client_code")) or "",
        customer_name_en=_text(row.get("customer_name_en")) or "",
        customer_name_ar=_text(row.get("customer_name_ar")) or "",
        latitude=_coerce_float(row.get("lat")),
        longitude=_coerce_float(row.get("lng")),
        rep_code=_text(row.get("rep_code")),
        day_name=_text(row.get("day_name")),
        week_number=_text(week),
        route_name=_text(row.get("route_name")),
        branch_code=_text(row.get("branch_code")),
        district=_text(row.get("district")),
        classification=_text(row.get("classification")),
        store_type=_text(row.get("store_type")),
        visit_order=_coerce_int(row.get("visit_order")),
        extra=extra,
    )


def is_analyzable(visit: Visit) -> bool:
    """Rows the optimizer can use: valid coordinates and a full rep/day/week/branch key."""

    if not is_valid_coordinate(visit.latitude, visit.longitude):
        return False
    return bool(visit.rep_code and visit.day_name and visit.week_number and visit.branch_code)


def _matches_filters(
    visit: Visit,
    filters: VisitFilters,
    allowed_branches: Sequence[str] | None,
) -> bool:
    if allowed_branches and visit.branch_code not in allowed_branches:
        return False
    branch = filters.effective_branch
    if branch and visit.branch_code != branch:
        return False
    week = filters.effective_week
    if week and visit.week_number != week:
        return False
    if filters.routes and visit.route_name not in filters.routes:
        return False
    return True


def _load_visits_from_database(
    company_id: str,
    filters: VisitFilters,
    allowed_branches: Sequence[str] | None,
) -> list[Visit] | None:
    """Query the visits table. Returns None when Supabase is not configured."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    query = (
        supabase.table(settings.visits_table)
        .select(", ".join(VISIT_COLUMNS))
        .not_.is_("lat", "null")
        .not_.is_("lng", "null")
        .neq("lat", 0)
        .neq("lng", 0)
        .not_.is_("week_number", "null")
        .not_.is_("day_name", "null")
        .not_.is_("branch_code", "null")
        .eq("company_id", company_id)
        .limit(settings.visit_fetch_limit)
    )
    if allowed_branches:
        query = query.in_("branch_code", list(allowed_branches))
    if filters.effective_branch:
        query = query.eq("branch_code", filters.effective_branch)
    if filters.effective_week:
        query = query.eq("week_number", filters.effective_week)
    if filters.routes:
        query = query.in_("route_name", list(filters.routes))

    response = query.execute()
    rows = response.data or []
    logging.info(f"Fetched {len(rows)} visit rows for company '{company_id}'")
    return [visit_from_row(row) for row in rows]


def _iter_file_rows(path: Path) -> Iterator[dict]:
    if path.suffix.lower() == ".xlsx":
        workbook = load_workbook(path, data_only=True, read_only=True)
        rows = workbook.active.iter_rows(values_only=True)
        header = next(rows, None)
        names = [str(cell).strip() if cell is not None else "" for cell in header or ()]
        if not any(names):
            raise ValueError(f"Visit workbook '{path}' is empty.")
        for row in rows:
            yield dict(zip(names, row))
        return

    with path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError(f"Visit file '{path}' is missing a header row.")
        yield from reader


def load_visits_from_file(
    source: Path | None = None,
    filters: VisitFilters | None = None,
    allowed_branches: Sequence[str] | None = None,
) -> list[Visit]:
    """Load visits from a CSV or XLSX export with the backend's column names."""

    path = source or settings.visits_file
    if not path.exists():
        raise FileNotFoundError(f"Visit file not found: {path}")

    filters = filters or VisitFilters()
    visits: list[Visit] = []
    for row in _iter_file_rows(path):
        visit = visit_from_row(row)
        if not _matches_filters(visit, filters, allowed_branches):
            continue
        visits.append(visit)
        if len(visits) >= settings.visit_fetch_limit:
            break
    return visits


def fetch_visits(
    company_id: str,
    filters: VisitFilters | None = None,
    allowed_branches: Sequence[str] | None = None,
) -> list[Visit]:
    """Fetch a fresh visit snapshot restricted to analyzable rows.

    Query failures propagate to the caller.
    """
    filters = filters or VisitFilters()
    visits = _load_visits_from_database(company_id, filters, allowed_branches)
    if visits is None:
        logging.info("Supabase not configured - reading visits from file")
        visits = load_visits_from_file(filters=filters, allowed_branches=allowed_branches)
    return [visit for visit in visits if is_analyzable(visit)]


def distinct_route_names(visits: Iterable[Visit]) -> list[str]:
    return sorted({visit.route_name for visit in visits if visit.route_name})


def fetch_branch_and_route_options(
    company_id: str,
    allowed_branches: Sequence[str] | None = None,
) -> dict:
    """List active branches and routes for populating filter controls."""

    empty = {"branches": [], "routes": [], "route_details": []}
    supabase = get_supabase_client()
    if not supabase:
        return empty

    try:
        branches_query = (
            supabase.table(settings.branches_table)
            .select("id, code, name_en")
            .eq("company_id", company_id)
            .eq("is_active", True)
            .order("name_en")
        )
        if allowed_branches:
            # Allowed branches are stored as display names.
            branches_query = branches_query.in_("name_en", list(allowed_branches))
        branch_rows = branches_query.execute().data or []

        branches = [
            {"code": row["code"], "name": row.get("name_en") or row["code"]}
            for row in branch_rows
        ]
        branch_ids = [row["id"] for row in branch_rows]

        routes_query = (
            supabase.table(settings.routes_table)
            .select("name, branch:company_branches!inner(code, name_en)")
            .eq("company_id", company_id)
            .eq("is_active", True)
            .order("name")
        )
        if allowed_branches:
            if not branch_ids:
                return empty
            routes_query = routes_query.in_("branch_id", branch_ids)

        try:
            route_rows = routes_query.execute().data or []
        except Exception as e:
            logging.warning(f"Error fetching routes: {e}")
            route_rows = []

        route_details = [
            {
                "name": row["name"],
                "branch": (row.get("branch") or {}).get("name_en") or "Unassigned",
            }
            for row in route_rows
        ]
        return {
            "branches": branches,
            "routes": sorted({detail["name"] for detail in route_details}),
            "route_details": route_details,
        }
    except Exception as e:
        logging.error(f"Error fetching optimizer filters: {e}")
        return empty

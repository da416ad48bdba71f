"""Domain models for route visits and customer/lead records."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(slots=True)
class Visit:
    """One scheduled customer stop for a rep on a given day and week."""

    client_code: str
    customer_name_en: str
    customer_name_ar: str
    latitude: Optional[float]
    longitude: Optional[float]
    rep_code: Optional[str]
    day_name: Optional[str]
    week_number: Optional[str]
    route_name: Optional[str]
    branch_code: Optional[str]
    district: Optional[str] = None
    classification: Optional[str] = None
    store_type: Optional[str] = None
    visit_order: Optional[int] = None
    extra: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class LeadRecord:
    """A customer/lead row as inspected by the cleaning engine.

    ``raw`` keeps the full backend row, including arbitrary imported columns;
    the named attributes are the only fields the analysis looks at.
    """

    id: str
    name: str
    latitude: Optional[float]
    longitude: Optional[float]
    branch: Optional[str]
    address: Optional[str]
    raw: dict

"""Fixed price list for billable actions and the add-on service catalog."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List

from services.errors import NotFoundError
from services.formatting import money_str


class PRICING:
    JOB_POST = Decimal("25.00")
    SUCCESSFUL_HIRE = Decimal("100.00")
    BACKGROUND_CHECK = Decimal("30.00")
    SKILL_ASSESSMENT = Decimal("15.00")
    VIDEO_INTERVIEW = Decimal("20.00")


@dataclass(frozen=True)
class AddOnService:
    code: str
    name: str
    category: str
    description: str
    price: Decimal


SERVICE_CATALOG: Dict[str, AddOnService] = {
    service.code: service
    for service in (
        AddOnService(
            code="background_check",
            name="Background Check",
            category="screening",
            description="Employment, education and criminal record verification for a candidate.",
            price=PRICING.BACKGROUND_CHECK,
        ),
        AddOnService(
            code="skill_assessment",
            name="Skill Assessment",
            category="assessment",
            description="Role-specific technical or aptitude test with a scored report.",
            price=PRICING.SKILL_ASSESSMENT,
        ),
        AddOnService(
            code="video_interview",
            name="Video Interview",
            category="interview",
            description="Recorded one-way video interview with shareable playback.",
            price=PRICING.VIDEO_INTERVIEW,
        ),
    )
}


def get_service(code: str) -> AddOnService:
    service = SERVICE_CATALOG.get((code or "").strip().lower())
    if service is None:
        raise NotFoundError(f"Service {code} not found")
    return service


def serialize_service(service: AddOnService) -> Dict[str, Any]:
    return {
        "code": service.code,
        "name": service.name,
        "category": service.category,
        "description": service.description,
        "price": money_str(service.price),
    }


def pricing_table() -> Dict[str, str]:
    return {
        "job_post": money_str(PRICING.JOB_POST),
        "successful_hire": money_str(PRICING.SUCCESSFUL_HIRE),
        "background_check": money_str(PRICING.BACKGROUND_CHECK),
        "skill_assessment": money_str(PRICING.SKILL_ASSESSMENT),
        "video_interview": money_str(PRICING.VIDEO_INTERVIEW),
    }


def list_services() -> List[Dict[str, Any]]:
    return [serialize_service(service) for service in SERVICE_CATALOG.values()]

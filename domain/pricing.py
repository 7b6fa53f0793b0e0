"""Companion fee table and billing calculation"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from domain.enums import Location
from domain.value_objects import BillingItem, PricingRule

SUNZAL_WEEKDAY_CATEGORY = "INVITADO LUNES-SABADO TEMP BAJA"
SUNZAL_SUNDAY_CATEGORY = "INVITADO DOMINGO TEMP BAJA"
CORINTO_GUEST_CATEGORY = "CUOTA INVITADO"

# date.weekday(): Monday is 0
SUNDAY = 6

PRICING_RULES: List[PricingRule] = [
    # El Sunzal
    PricingRule(
        location=Location.EL_SUNZAL,
        category="INVITADO DIA FESTIVO TEMP ALTA",
        description="COBRO INVITADO DIA FESTIVO TEMP ALTA",
        price=Decimal("20.00"),
    ),
    PricingRule(
        location=Location.EL_SUNZAL,
        category="INVITADOS EVENTO",
        description="INVITADOS EVENTO",
        price=Decimal("10.00"),
    ),
    PricingRule(
        location=Location.EL_SUNZAL,
        category=SUNZAL_WEEKDAY_CATEGORY,
        description="INVITADO LUNES-SABADO TEMP BAJA",
        price=Decimal("10.00"),
    ),
    PricingRule(
        location=Location.EL_SUNZAL,
        category=SUNZAL_SUNDAY_CATEGORY,
        description="INVITADO DOMINGO TEMP BAJA",
        price=Decimal("15.00"),
    ),
    PricingRule(
        location=Location.EL_SUNZAL,
        category="INVITADO DIA FESTIVO TEMP BAJA",
        description="INVITADO DIA FESTIVO TEMP BAJA",
        price=Decimal("20.00"),
    ),
    # Corinto
    PricingRule(
        location=Location.CORINTO,
        category=CORINTO_GUEST_CATEGORY,
        description="CUOTA INVITADO",
        price=Decimal("10.00"),
    ),
    PricingRule(
        location=Location.CORINTO,
        category="GF INVITADO SOCIO",
        description="GREEN FREE (Uso de las canchas de golf)",
        price=Decimal("60.00"),
    ),
    PricingRule(
        location=Location.CORINTO,
        category="INVITADOS EVENTO",
        description="INVITADOS EVENTO",
        price=Decimal("10.00"),
    ),
]


def get_pricing_rules(location: Optional[Location] = None) -> List[PricingRule]:
    """List the fee table, optionally for a single location"""
    if location is None:
        return list(PRICING_RULES)
    return [rule for rule in PRICING_RULES if rule.location == location]


def _find_rule(location: Location, category: str) -> PricingRule:
    for rule in PRICING_RULES:
        if rule.location == location and rule.category == category:
            return rule
    raise LookupError(f"No pricing rule {category!r} for {location.value}")


def select_rule(location: Location, on_date: date) -> PricingRule:
    """Pick the guest fee that applies at a location on a given day.

    El Sunzal charges its Sunday low-season fee on Sundays and the
    Monday-Saturday fee otherwise. Corinto has a single guest fee.
    Holiday and event fees are never chosen here; staff apply them manually.
    """
    if location == Location.EL_SUNZAL:
        if on_date.weekday() == SUNDAY:
            return _find_rule(location, SUNZAL_SUNDAY_CATEGORY)
        return _find_rule(location, SUNZAL_WEEKDAY_CATEGORY)
    return _find_rule(location, CORINTO_GUEST_CATEGORY)


def calculate_items(location: Location, companions_count: int, on_date: date) -> List[BillingItem]:
    """Build the line items for a member's companions"""
    if companions_count < 0:
        raise ValueError("Companions count cannot be negative")
    if companions_count == 0:
        return []

    rule = select_rule(location, on_date)
    return [
        BillingItem(
            description=rule.description,
            unit_price=rule.price,
            quantity=companions_count,
            total=rule.price * companions_count,
            location=location,
            category=rule.category,
        )
    ]

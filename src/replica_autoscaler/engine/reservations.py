"""Overlay of temporary capacity reservations on top of the baseline."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..resources import CapacityReservation


def active_reservation_total(reservations: Iterable[CapacityReservation], now: datetime) -> int:
    return sum(reservation.replicas for reservation in reservations if reservation.is_active(now))

"""Travel time estimation from straight-line distance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ...config import settings


class TravelTimeEstimator(Protocol):
    def estimate_minutes(self, distance_km: float, *, is_urban: bool = True) -> float:
        ...


@dataclass(slots=True)
class TieredSpeedEstimator:
    """Average-speed model with speed tiers by segment length.

    Urban trips get a congestion multiplier on top, with a floor for short
    hops; open-road trips are taken at the tier speed.
    """

    residential_speed_kmh: float = 20.0
    arterial_speed_kmh: float = 40.0
    highway_speed_kmh: float = 75.0
    traffic_factor: float = settings.urban_traffic_factor
    short_hop_traffic_factor: float = settings.short_hop_traffic_factor

    def speed_for(self, distance_km: float) -> float:
        if distance_km < 2.0:
            return self.residential_speed_kmh
        if distance_km < 10.0:
            return self.arterial_speed_kmh
        return self.highway_speed_kmh

    def estimate_minutes(self, distance_km: float, *, is_urban: bool = True) -> float:
        if distance_km <= 0:
            return 0.0
        minutes = distance_km / self.speed_for(distance_km) * 60
        if not is_urban:
            return minutes
        factor = self.traffic_factor
        if distance_km < 5.0:
            factor = max(factor, self.short_hop_traffic_factor)
        return minutes * factor


@dataclass(slots=True)
class ConstantSpeedEstimator:
    speed_kmh: float

    def estimate_minutes(self, distance_km: float, *, is_urban: bool = True) -> float:
        if self.speed_kmh <= 0:
            raise ValueError("speed_kmh must be > 0")
        return max(distance_km, 0.0) / self.speed_kmh * 60

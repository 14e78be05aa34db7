"""
Canonical record shapes shared by providers, services and routes.

Every upstream response is normalized into one of these frozen dataclasses
before it leaves the provider layer, so the rest of the engine never sees raw
provider JSON.
"""

from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import Optional, List, Dict, Any


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float


@dataclass(frozen=True)
class Place:
    """A point of interest near a destination.

    `name` is never empty and `point` is always set; records that fail this
    are dropped during normalization.
    """
    name: str
    point: GeoPoint
    external_id: Optional[str] = None
    distance_m: Optional[float] = None
    kinds: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PlaceShape(Enum):
    """Discriminant for the two raw place layouts returned by OpenTripMap."""
    POINT = "point"
    GEOMETRY = "geometry"


@dataclass(frozen=True)
class PlaceDetail:
    external_id: Optional[str]
    preview_image: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.preview_image is None and self.description is None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GuideSectionListing:
    """One entry of a guide outline: human label plus upstream numeric index."""
    label: str
    index: int


@dataclass(frozen=True)
class GuideOutline:
    """Section listing plus the full rendered page markup."""
    title: str
    html: str
    sections: List[GuideSectionListing] = field(default_factory=list)


@dataclass(frozen=True)
class GuideSectionRef:
    """Maps a stable topic label to a volatile upstream section id.

    The id is only meaningful for the title it was resolved against.
    """
    label: str
    section_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "section_id": self.section_id}


@dataclass(frozen=True)
class GuideView:
    """Resolved guide: ordered refs plus every prefetched section body."""
    title: str
    refs: List[GuideSectionRef] = field(default_factory=list)
    sections: Dict[int, str] = field(default_factory=dict)
    initial_html: Optional[str] = None

    @property
    def available(self) -> bool:
        return bool(self.refs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "available": self.available,
            "refs": [r.to_dict() for r in self.refs],
            "initial_html": self.initial_html,
        }


class SummarySource(Enum):
    PRIMARY_GUIDE = "Wikivoyage"
    ENCYCLOPEDIA = "Wikipedia"


@dataclass(frozen=True)
class Summary:
    text: str
    url: str
    source: SummarySource

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "url": self.url, "source": self.source.value}


@dataclass(frozen=True)
class ClimateMonth:
    """Aggregated forecast statistics for one calendar month (0 = January).

    Built from short-range forecast samples, so it is an approximation and
    not long-run climatology.
    """
    month: int
    avg_temperature_c: float
    avg_humidity_pct: float
    total_rain_mm: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ForecastSample:
    """One raw forecast point. Timestamps are timezone-aware UTC."""
    timestamp: datetime
    temperature_c: float
    humidity_pct: float
    precipitation_mm: Optional[float] = None


class MonthRating(Enum):
    GOOD = "good"
    BAD = "bad"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lon: float
    display_name: str

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lon)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CurrentWeather:
    temperature_c: float
    feels_like_c: Optional[float] = None
    condition: Optional[str] = None


@dataclass(frozen=True)
class DailyRange:
    day: date
    min_c: float
    max_c: float


@dataclass(frozen=True)
class WeatherDigest:
    current: Optional[CurrentWeather] = None
    days: List[DailyRange] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": asdict(self.current) if self.current else None,
            "days": [
                {"day": d.day.isoformat(), "min_c": d.min_c, "max_c": d.max_c}
                for d in self.days
            ],
        }


@dataclass(frozen=True)
class Photo:
    id: str
    thumb_url: str
    full_url: str
    alt: str
    author: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DestinationBundle:
    """Everything the engine could gather for one destination name."""
    name: str
    geo: Optional[GeocodeResult] = None
    photos: List[Photo] = field(default_factory=list)
    summary: Optional[Summary] = None
    guide: Optional[GuideView] = None
    places: List[Place] = field(default_factory=list)
    climate: Optional[List[ClimateMonth]] = None
    weather: Optional[WeatherDigest] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "geo": self.geo.to_dict() if self.geo else None,
            "photos": [p.to_dict() for p in self.photos],
            "summary": self.summary.to_dict() if self.summary else None,
            "guide": self.guide.to_dict() if self.guide else None,
            "places": [p.to_dict() for p in self.places],
            "climate": (
                {"approximate": True, "months": [m.to_dict() for m in self.climate]}
                if self.climate is not None
                else None
            ),
            "weather": self.weather.to_dict() if self.weather else None,
        }

from dataclasses import dataclass


def format_coordinate(value: float, places: int) -> str:
    # -0.0 + 0.0 is 0.0
    return f"{round(value, places) + 0.0:.{places}f}"


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def is_valid(self) -> bool:
        return -90 <= self.lat <= 90 and -180 <= self.lng <= 180

    def as_text(self, places: int | None = None) -> str:
        if places is None:
            return f"{self.lat},{self.lng}"
        return f"{format_coordinate(self.lat, places)},{format_coordinate(self.lng, places)}"


@dataclass(frozen=True)
class BoundingBox:
    left: float
    top: float
    right: float
    bottom: float

    def as_viewbox(self) -> str:
        return f"{self.left},{self.top},{self.right},{self.bottom}"

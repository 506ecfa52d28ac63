"""Duration handling utilities."""


class Duration:
    """Represents a duration in seconds with convenient operators."""

    @classmethod
    def from_hours(cls, hours: float) -> "Duration":
        """Build a Duration from fractional hours, truncated to whole seconds."""
        return cls(int(hours * 3600))

    @classmethod
    def from_minutes(cls, minutes: int) -> "Duration":
        """Build a Duration from whole minutes."""
        return cls(60 * minutes)

    def __init__(self, seconds: int = 0) -> None:
        self.seconds: int = seconds

    def hours_and_minutes(self) -> tuple[int, int]:
        """
        Split into whole hours and remaining minutes.

        Hours carry the sign, minutes are always positive: -90 minutes is (-1, 30).
        """
        sign = -1 if self.seconds < 0 else 1
        hours, remainder = divmod(abs(self.seconds), 3600)
        return sign * hours, remainder // 60

    def __repr__(self) -> str:
        sign = "-" if self.seconds < 0 else ""
        abs_minutes = abs(self.seconds) // 60
        return f"{sign}{abs_minutes // 60:02}:{abs_minutes % 60:02}"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.seconds == other.seconds

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.seconds != other.seconds

    def __hash__(self) -> int:
        return hash(self.seconds)

    def __add__(self, other: "Duration") -> "Duration":
        return Duration(self.seconds + other.seconds)

    def __sub__(self, other: "Duration") -> "Duration":
        return Duration(self.seconds - other.seconds)

    def __neg__(self) -> "Duration":
        return Duration(-self.seconds)

    def __mul__(self, other: int) -> "Duration":
        return Duration(other * self.seconds)

    def __lt__(self, other: "Duration") -> bool:
        return self.seconds < other.seconds

    def __gt__(self, other: "Duration") -> bool:
        return self.seconds > other.seconds

    def __le__(self, other: "Duration") -> bool:
        return self.seconds <= other.seconds

    def __ge__(self, other: "Duration") -> bool:
        return self.seconds >= other.seconds

    def __abs__(self) -> "Duration":
        return Duration(abs(self.seconds))

    def __bool__(self) -> bool:
        return self.seconds > 0

"""Resume status whitelist used by the review workflow."""

from dataclasses import dataclass

from app.config import Settings


@dataclass(frozen=True)
class ResumeStatusPolicy:
    """
    Fixed set of statuses a resume may hold.

    Membership is the only rule: any listed status may follow any other.
    The first status is assigned to newly created resumes.
    """

    statuses: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.statuses:
            raise ValueError("At least one resume status must be configured")
        if len(set(self.statuses)) != len(self.statuses):
            raise ValueError(f"Duplicate resume statuses: {', '.join(self.statuses)}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResumeStatusPolicy":
        return cls(statuses=tuple(settings.resume_statuses_list))

    @property
    def initial_status(self) -> str:
        return self.statuses[0]

    def validate_status(self, next_status: str) -> tuple[bool, str | None]:
        """
        Validate that a status belongs to the whitelist.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if next_status not in self.statuses:
            return (
                False,
                f"Unknown status: {next_status}. "
                f"Allowed statuses: {', '.join(self.statuses)}",
            )
        return True, None

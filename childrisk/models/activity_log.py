from dataclasses import dataclass
from enum import Enum


class ActivityType(str, Enum):
    PREDICTION = "prediction"
    EXPORT = "export"
    SYSTEM = "system"


@dataclass(frozen=True)
class ActivityLog:
    id: str
    action: str
    timestamp: str  # display string, not parsed back
    type: ActivityType

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "action": self.action,
            "timestamp": self.timestamp,
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ActivityLog":
        return cls(
            id=str(data["id"]),
            action=data["action"],
            timestamp=data["timestamp"],
            type=ActivityType(data["type"]),
        )

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class EducationLevel(str, Enum):
    NONE = "None"
    PRIMARY = "Primary"
    SECONDARY = "Secondary"
    HIGHER = "Higher"


class Region(str, Enum):
    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"
    CENTRAL = "Central"


@dataclass(frozen=True)
class SurveyInput:
    """
    One household/child survey submission.

    Ranges are documented, not enforced: the scorer accepts whatever
    numbers it is given. Range checks live at the API boundary.
    """
    child_age_months: float          # 0-60
    household_income_score: float    # 0-100, higher = better
    food_insecurity_score: float     # 0-100, higher = worse
    water_access_score: float        # 0-100, higher = better
    sanitation_access_score: float   # 0-100, higher = better
    education_level: EducationLevel
    region: Region
    household_size: int              # 1-20

    def to_dict(self) -> Dict[str, Any]:
        return {
            "childAge": self.child_age_months,
            "householdIncome": self.household_income_score,
            "foodInsecurity": self.food_insecurity_score,
            "waterAccess": self.water_access_score,
            "sanitationAccess": self.sanitation_access_score,
            "educationLevel": self.education_level.value,
            "region": self.region.value,
            "householdSize": self.household_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SurveyInput":
        return cls(
            child_age_months=data["childAge"],
            household_income_score=data["householdIncome"],
            food_insecurity_score=data["foodInsecurity"],
            water_access_score=data["waterAccess"],
            sanitation_access_score=data["sanitationAccess"],
            education_level=EducationLevel(data["educationLevel"]),
            region=Region(data["region"]),
            household_size=data["householdSize"],
        )

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PlantSize = Literal["Small", "Medium", "Large"]
GrowthStage = Literal["Seedling", "Young", "Mature", "Established"]
LightLevel = Literal["Low light", "Bright indirect light", "Direct sunlight"]

SIZE_CHOICES = ["Small", "Medium", "Large"]
GROWTH_STAGE_CHOICES = ["Seedling", "Young", "Mature", "Established"]

DEFAULT_NAME = "Plant"
DEFAULT_SIZE = "Medium"
DEFAULT_GROWTH_STAGE = "Mature"
DEFAULT_MOISTURE_LEVEL = "50"
DEFAULT_LIGHT = "Bright indirect light"
DEFAULT_WATERING_FREQUENCY = 7
DEFAULT_WATERING_AMOUNT = "Until soil is moist"
NO_ISSUES_DETECTED = "No specific issues detected"
DEFAULT_CARE_TIPS = "Follow general plant care guidelines"
DEFAULT_INTERESTING_FACTS = (
    "Every plant is unique",
    "Plants grow throughout their lifecycle",
    "Proper care helps plants thrive",
    "Plants can communicate with each other",
)
MAX_INTERESTING_FACTS = 4


class PlantCareRecord(BaseModel):
    """Structured care record returned to the mobile client."""

    model_config = ConfigDict(frozen=True)

    general_description: str = ""
    name: str = DEFAULT_NAME
    species: str = ""
    plant_size: PlantSize = DEFAULT_SIZE
    pot_size: PlantSize = DEFAULT_SIZE
    growth_stage: GrowthStage = DEFAULT_GROWTH_STAGE
    moisture_level: str = DEFAULT_MOISTURE_LEVEL
    light: LightLevel = DEFAULT_LIGHT
    watering_frequency: int = DEFAULT_WATERING_FREQUENCY
    watering_amount: str = DEFAULT_WATERING_AMOUNT
    specific_issues: str = NO_ISSUES_DETECTED
    care_tips: str = DEFAULT_CARE_TIPS
    interesting_facts: List[str] = Field(
        default_factory=lambda: list(DEFAULT_INTERESTING_FACTS),
        max_length=MAX_INTERESTING_FACTS,
    )


class AnalyzePhotoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base64_image: Optional[str] = Field(default=None, alias="base64Image")
    plant_name: Optional[str] = Field(default=None, alias="plantName")


class GenerateContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plant_name: Optional[str] = Field(default=None, alias="plantName")
    species: Optional[str] = None


class InterpretRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    raw_response: str = Field(alias="rawResponse")

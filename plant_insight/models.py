"""
Pydantic models for the plant analysis API.

Field names follow the JSON the model is asked to produce (camelCase) so the
parsed reply can be returned to the browser without renaming.
"""
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class AnalysisRequest(BaseModel):
    """Validated inbound request. `land_area_acres` is passed through unchecked."""
    image: str
    land_area_acres: Optional[Any] = None


class Pest(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    description: Optional[str] = None


class Pesticide(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    type: Optional[str] = None
    usage: Optional[str] = None


class Fertilizer(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    type: Optional[str] = None
    timing: Optional[str] = None


class SoilRequirements(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    pH: Optional[str] = None
    drainage: Optional[str] = None


class SeasonInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    bestSeasons: List[str] = Field(default_factory=list)
    currentSeasonSuitable: Optional[bool] = None
    reason: Optional[str] = None


class YieldEstimate(BaseModel):
    model_config = ConfigDict(extra="allow")

    perAcre: Optional[Any] = None
    unit: Optional[str] = None
    marketPrice: Optional[str] = None
    notes: Optional[str] = None


class DerivedYieldSummary(BaseModel):
    """Computed locally from the model's per-acre yield and the stated land area."""
    acres: Union[int, float]
    totalYield: str
    estimatedRevenue: str


class PlantAnalysis(BaseModel):
    """Schema the model is instructed to return. Every field is optional."""
    model_config = ConfigDict(extra="allow")

    plantName: Optional[str] = None
    scientificName: Optional[str] = None
    species: Optional[str] = None
    growthDays: Optional[str] = None
    description: Optional[str] = None
    pests: List[Pest] = Field(default_factory=list)
    pesticides: List[Pesticide] = Field(default_factory=list)
    fertilizers: List[Fertilizer] = Field(default_factory=list)
    soilRequirements: Optional[SoilRequirements] = None
    seasonInfo: Optional[SeasonInfo] = None
    yieldEstimate: Optional[YieldEstimate] = None
    careInstructions: List[str] = Field(default_factory=list)
    confidence: Optional[float] = Field(None, ge=0, le=1)
    totalYieldEstimate: Optional[DerivedYieldSummary] = None


class FailureResult(BaseModel):
    error: str
    rawResponse: Optional[str] = None

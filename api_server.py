"""
FastAPI wrapper for the pollen risk engine.

Endpoints:
- GET /health       : readiness probe
- GET /scenarios    : names of the bundled synthetic scenarios and regions
- POST /risk        : score an environment (or named scenario) for a profile
- POST /learn       : infer severities from symptom logs for a profile
- POST /regions     : score every bundled region for a profile (map data)

Run locally:
    uvicorn api_server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator

from pollen_risk import (
    AllergyProfile,
    EnvironmentalData,
    PollenMeasurement,
    ProfileLearner,
    RecommendationEngine,
    RiskEngine,
    SymptomLog,
    TestStatus,
    WeatherType,
    resolve_pollen_type,
)
from pollen_risk.dashboard import forecast_message
from pollen_risk.pollen_types import resolve_severity, resolve_test_status
from pollen_risk.scenarios import (
    BEIJING_MID_MARCH_WEEK,
    REGIONAL_POLLEN_DATA,
    assess_regions,
    find_region,
    find_scenario,
)

app = FastAPI(
    title="Pollen Risk API",
    description="REST API for personalized pollen risk scoring and symptom-driven learning.",
    version="1.0.0",
)

# CORS for broad consumption; tighten in production by setting allowed origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _pollen_or_422(name: str):
    pollen = resolve_pollen_type(name)
    if pollen is None:
        raise HTTPException(status_code=422, detail=f"Unknown pollen type: {name}")
    return pollen


class ProfileModel(BaseModel):
    allergy_types: List[str] = Field(default_factory=list, description="Pollen names (e.g. birch, grass)")
    severity_mapping: Dict[str, str] = Field(
        default_factory=dict, description="Pollen name -> mild/moderate/severe/unknown"
    )
    has_tested_before: Optional[str] = Field(None, description="yes, no, or not sure (default)")

    @field_validator("allergy_types")
    @classmethod
    def _strip_names(cls, v: List[str]) -> List[str]:
        return [name.strip() for name in v if name.strip()]

    def to_profile(self) -> AllergyProfile:
        mapping = {}
        for name, level in self.severity_mapping.items():
            severity = resolve_severity(level)
            if severity is None:
                raise HTTPException(status_code=422, detail=f"Unknown severity: {level}")
            mapping[_pollen_or_422(name)] = severity
        status = TestStatus.NOT_SURE
        if self.has_tested_before is not None:
            status = resolve_test_status(self.has_tested_before)
            if status is None:
                raise HTTPException(
                    status_code=422, detail=f"Unknown test status: {self.has_tested_before}"
                )
        return AllergyProfile(
            allergy_types={_pollen_or_422(name) for name in self.allergy_types},
            severity_mapping=mapping,
            has_tested_before=status,
        )


class EnvironmentModel(BaseModel):
    counts: Dict[str, float] = Field(..., description="Pollen name -> grain count")
    humidity: float = 50.0
    wind_speed: float = 10.0
    is_thunderstorm: bool = False
    weather_visual: WeatherType = WeatherType.CLEAR

    def to_environment(self) -> EnvironmentalData:
        return EnvironmentalData(
            measurements=[
                PollenMeasurement(type=_pollen_or_422(name), count=count)
                for name, count in self.counts.items()
            ],
            humidity=self.humidity,
            wind_speed=self.wind_speed,
            is_thunderstorm=self.is_thunderstorm,
            weather_visual=self.weather_visual,
        )


class RiskRequest(BaseModel):
    profile: ProfileModel
    environment: Optional[EnvironmentModel] = None
    scenario: Optional[str] = Field(
        None, description="Beijing week day or region name, used when environment is omitted"
    )


class SymptomLogModel(BaseModel):
    date: datetime
    sneezing: int = Field(0, ge=0, le=3)
    itchy_eyes: int = Field(0, ge=0, le=3)
    congestion: int = Field(0, ge=0, le=3)
    notes: str = ""
    historical_risk_score: Optional[float] = None
    historical_dominant_allergen: Optional[str] = None

    def to_log(self) -> SymptomLog:
        dominant = (
            _pollen_or_422(self.historical_dominant_allergen)
            if self.historical_dominant_allergen
            else None
        )
        return SymptomLog(
            date=self.date,
            sneezing=self.sneezing,
            itchy_eyes=self.itchy_eyes,
            congestion=self.congestion,
            notes=self.notes,
            historical_risk_score=self.historical_risk_score,
            historical_dominant_allergen=dominant,
        )


class LearnRequest(BaseModel):
    profile: ProfileModel
    logs: List[SymptomLogModel] = Field(default_factory=list)


class RiskResponse(BaseModel):
    assessment: Dict
    recommendations: Dict
    advice: List[str]
    forecast: Dict[str, str]


class LearnResponse(BaseModel):
    profile: Dict
    updates: Dict[str, str]
    changed: bool
    skipped: bool


class RegionResult(BaseModel):
    name: str
    latitude: float
    longitude: float
    assessment: Dict


class RegionsResponse(BaseModel):
    regions: List[RegionResult]


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/scenarios")
def scenarios() -> Dict[str, List[str]]:
    return {
        "week": [s.name for s in BEIJING_MID_MARCH_WEEK],
        "regions": [r.name for r in REGIONAL_POLLEN_DATA],
    }


def _resolve_environment(request: RiskRequest) -> EnvironmentalData:
    if request.environment is not None:
        return request.environment.to_environment()
    if not request.scenario:
        raise HTTPException(status_code=422, detail="Provide either environment or scenario")
    scenario = find_scenario(request.scenario)
    if scenario:
        return scenario.environment
    region = find_region(request.scenario)
    if region:
        return region.environment
    raise HTTPException(status_code=404, detail=f"Scenario not found: {request.scenario}")


@app.post("/risk", response_model=RiskResponse)
def risk(request: RiskRequest):
    profile = request.profile.to_profile()
    environment = _resolve_environment(request)

    assessment = RiskEngine.calculate_risk(environment, profile)
    recommendations = RecommendationEngine.generate_recommendations(assessment)
    title, body = forecast_message(assessment)
    return {
        "assessment": assessment.to_dict(),
        "recommendations": recommendations.to_dict(),
        "advice": recommendations.advice_lines(),
        "forecast": {"title": title, "body": body},
    }


@app.post("/learn", response_model=LearnResponse)
def learn(request: LearnRequest):
    profile = request.profile.to_profile()
    logs = [entry.to_log() for entry in request.logs]
    result = ProfileLearner.learn_from_logs(profile, logs)
    return {
        "profile": result.profile.to_dict(),
        "updates": {p.value: s.value for p, s in result.updates.items()},
        "changed": result.changed,
        "skipped": result.skipped,
    }


@app.post("/regions", response_model=RegionsResponse)
def regions(profile: ProfileModel):
    region_by_name = {r.name: r for r in REGIONAL_POLLEN_DATA}
    results = []
    for name, assessment in assess_regions(profile.to_profile()).items():
        region = region_by_name[name]
        results.append(
            {
                "name": name,
                "latitude": region.latitude,
                "longitude": region.longitude,
                "assessment": assessment.to_dict(),
            }
        )
    return {"regions": results}


if __name__ == "__main__":
    uvicorn.run("api_server:app", host="0.0.0.0", port=8000, reload=False)

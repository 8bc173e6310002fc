from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CamelModel(BaseModel):
    # Field names are snake_case in Python, camelCase on the wire (the model's JSON)
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


# One candidate as entered in the UI (pasted or extracted text)
class ResumeInput(BaseModel):
    id: str = Field(min_length=1)
    text: str = ""

    @field_validator("id")
    @classmethod
    def strip_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Resume ID must not be blank")
        return value


class ScreeningRequest(BaseModel):
    resumes: List[ResumeInput]


class CriterionScores(CamelModel):
    technical_skills: float = Field(alias="technicalSkills")
    practical_experience: float = Field(alias="practicalExperience")
    analytical_thinking: float = Field(alias="analyticalThinking")
    communication_evidence: float = Field(alias="communicationEvidence")


class ResumeEvaluation(CamelModel):
    resume_id: str = Field(alias="resumeId")
    scores: CriterionScores
    total_score: Optional[float] = Field(default=None, alias="totalScore")
    strengths: List[str]
    gaps: List[str]
    justification: str


class ScreeningResult(CamelModel):
    evaluations: List[ResumeEvaluation]
    top_candidates: List[str] = Field(alias="topCandidates")
    fairness_check: str = Field(alias="fairnessCheck")

    def evaluation_for(self, resume_id: str) -> Optional[ResumeEvaluation]:
        return next((e for e in self.evaluations if e.resume_id == resume_id), None)

    def top_evaluations(self) -> List[ResumeEvaluation]:
        """Evaluations of the ranked candidates, in ranking order."""
        found = (self.evaluation_for(rid) for rid in self.top_candidates)
        return [e for e in found if e is not None]


class StoredRun(CamelModel):
    id: int
    created_at: datetime = Field(alias="createdAt")

    # SQLite hands back naive datetimes; they are stored as UTC
    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# Persisted screening run, as returned by the API
class ScreeningRunOut(StoredRun):
    provider: str
    model: str
    resume_ids: List[str] = Field(alias="resumeIds")
    result: ScreeningResult


class ScreeningRunSummary(StoredRun):
    provider: str
    model: str
    resume_count: int = Field(alias="resumeCount")
    top_candidates: List[str] = Field(alias="topCandidates")


class ExtractedText(BaseModel):
    filename: str
    text: str
    characters: int


class CriterionOut(BaseModel):
    key: str
    name: str
    weight: int
    focus: List[str]


class RubricOut(CamelModel):
    role: str
    criteria: List[CriterionOut]
    fairness_attributes: List[str] = Field(alias="fairnessAttributes")
    max_resumes: int = Field(alias="maxResumes")
    top_candidates: int = Field(alias="topCandidates")

from dataclasses import dataclass
from typing import Dict, List

ROLE = "Data Analyst"
MAX_RESUMES = 20
TOP_CANDIDATES = 5


@dataclass(frozen=True)
class Criterion:
    key: str  # camelCase key used in the model's JSON
    name: str
    weight: int  # percent
    focus: List[str]


CRITERIA: List[Criterion] = [
    Criterion(
        key="technicalSkills",
        name="Technical Skills",
        weight=40,
        focus=[
            "SQL",
            "Python/R",
            "Data cleaning & transformation",
            "Statistical analysis",
            "BI tools (Tableau, Power BI, etc.)",
        ],
    ),
    Criterion(
        key="practicalExperience",
        name="Practical Experience",
        weight=30,
        focus=[
            "Data analysis projects (professional or academic)",
            "Business problem framing",
            "Real datasets and outcomes",
        ],
    ),
    Criterion(
        key="analyticalThinking",
        name="Analytical Thinking",
        weight=20,
        focus=["Problem-solving examples", "Insight generation", "Decision-support use cases"],
    ),
    Criterion(
        key="communicationEvidence",
        name="Communication Evidence",
        weight=10,
        focus=[
            "Clarity of explanations",
            "Stakeholder reporting",
            "Documentation or dashboards",
        ],
    ),
]

# Attributes the model must not consider in any form
FAIRNESS_ATTRIBUTES: List[str] = [
    "Gender or gender-coded language",
    "Age or graduation year",
    "Ethnicity, caste, religion, or race",
    "Nationality or country of origin",
    "University name, college prestige, or ranking",
]

WEIGHTS: Dict[str, float] = {c.key: c.weight / 100 for c in CRITERIA}

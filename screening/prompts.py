import json
from typing import Iterable

from schemas import ResumeInput
from screening.rubric import CRITERIA, FAIRNESS_ATTRIBUTES, ROLE, TOP_CANDIDATES

SYSTEM_TEMPLATE = """You are an impartial resume-screening assistant for a {role} position. Your task is to evaluate resumes strictly on job-related competencies and demonstrated skills.

Explicit Fairness Constraints (Mandatory):
You must not consider the following attributes in any form:
{fairness}

If such attributes appear, you must ignore them completely and not reference them in reasoning or scoring.

Evaluation Criteria (Only These Are Allowed):
{criteria}

Scoring Rules:
- Score each resume on a 0–100 scale.
- Provide criterion-level sub-scores (each 0–100).
- Use evidence-based justification quoting resume content.
- Rank the top {top} candidates by total score in 'topCandidates' (resume IDs only).
- In 'fairnessCheck', state how the fairness constraints were applied."""

USER_TEMPLATE = """Evaluate the following {count} resume(s) for a {role} role.

Resumes:
{resumes}

Return the results in the specified JSON format."""

RESUME_BLOCK = "--- Resume ID: {id} ---\n{text}"

# Structured output schema (OpenAPI subset accepted by Gemini's responseSchema)
_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "evaluations": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "resumeId": _STRING,
                    "scores": {
                        "type": "OBJECT",
                        "properties": {c.key: {"type": "NUMBER"} for c in CRITERIA},
                        "required": [c.key for c in CRITERIA],
                    },
                    "totalScore": {"type": "NUMBER"},
                    "strengths": _STRING_LIST,
                    "gaps": _STRING_LIST,
                    "justification": _STRING,
                },
                "required": ["resumeId", "scores", "totalScore", "strengths", "gaps", "justification"],
            },
        },
        "topCandidates": {
            "type": "ARRAY",
            "items": _STRING,
            "description": f"IDs of the top {TOP_CANDIDATES} candidates ranked",
        },
        "fairnessCheck": {
            "type": "STRING",
            "description": "A statement confirming compliance with fairness constraints",
        },
    },
    "required": ["evaluations", "topCandidates", "fairnessCheck"],
}

# Shape example for providers without schema-constrained output
JSON_SHAPE_EXAMPLE = {
    "evaluations": [
        {
            "resumeId": "1",
            "scores": {c.key: 0 for c in CRITERIA},
            "totalScore": 0,
            "strengths": ["..."],
            "gaps": ["..."],
            "justification": "...",
        }
    ],
    "topCandidates": ["1"],
    "fairnessCheck": "...",
}


def build_system_instruction() -> str:
    fairness = "\n".join(f"- {attr}" for attr in FAIRNESS_ATTRIBUTES)
    criteria = "\n".join(
        f"{i}. {c.name} ({c.weight}%): {', '.join(c.focus)}" for i, c in enumerate(CRITERIA, start=1)
    )
    return SYSTEM_TEMPLATE.format(role=ROLE, fairness=fairness, criteria=criteria, top=TOP_CANDIDATES)


def build_json_instruction() -> str:
    """System instruction plus the literal JSON shape, for JSON-mode-only providers."""
    return (
        build_system_instruction()
        + "\n\nOUTPUT FORMAT (STRICT JSON, no markdown):\n"
        + json.dumps(JSON_SHAPE_EXAMPLE, indent=2)
    )


def build_user_prompt(resumes: Iterable[ResumeInput]) -> str:
    resumes = list(resumes)
    blocks = "\n\n".join(RESUME_BLOCK.format(id=r.id, text=r.text.strip()) for r in resumes)
    return USER_TEMPLATE.format(count=len(resumes), role=ROLE, resumes=blocks)

from typing import Dict, Iterable, List

from schemas import ResumeEvaluation
from screening.rubric import TOP_CANDIDATES, WEIGHTS


def clamp_score(value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(100.0, value))


def criterion_scores(evaluation: ResumeEvaluation) -> Dict[str, float]:
    """Sub-scores keyed the way the rubric names them (camelCase)."""
    return evaluation.scores.model_dump(by_alias=True)


def weighted_total(scores: Dict[str, float]) -> float:
    # Weights: Technical 40, Experience 30, Analytical 20, Communication 10
    total = sum(WEIGHTS[key] * clamp_score(scores.get(key)) for key in WEIGHTS)
    return round(total, 2)


def normalize_evaluation(evaluation: ResumeEvaluation) -> ResumeEvaluation:
    scores = {k: clamp_score(v) for k, v in criterion_scores(evaluation).items()}
    if evaluation.total_score is None:
        total = weighted_total(scores)
    else:
        total = clamp_score(evaluation.total_score)
    return evaluation.model_copy(
        update={
            "scores": evaluation.scores.model_copy(
                update={
                    "technical_skills": scores["technicalSkills"],
                    "practical_experience": scores["practicalExperience"],
                    "analytical_thinking": scores["analyticalThinking"],
                    "communication_evidence": scores["communicationEvidence"],
                }
            ),
            "total_score": total,
            "strengths": [s.strip() for s in evaluation.strengths if s and s.strip()],
            "gaps": [g.strip() for g in evaluation.gaps if g and g.strip()],
            "justification": evaluation.justification.strip(),
        }
    )


def rank_by_total(evaluations: Iterable[ResumeEvaluation], limit: int = TOP_CANDIDATES) -> List[str]:
    """Resume IDs ordered by total score, highest first; ties keep input order."""
    ordered = sorted(enumerate(evaluations), key=lambda x: (-(x[1].total_score or 0.0), x[0]))
    return [e.resume_id for _, e in ordered[:limit]]


def clean_ranking(ranking: Iterable[str], known_ids: Iterable[str], limit: int = TOP_CANDIDATES) -> List[str]:
    """Keep known IDs only, first occurrence wins, at most `limit` entries."""
    known = set(known_ids)
    seen = set()
    cleaned = []
    for rid in ranking:
        rid = str(rid).strip()
        if rid in known and rid not in seen:
            seen.add(rid)
            cleaned.append(rid)
    return cleaned[:limit]

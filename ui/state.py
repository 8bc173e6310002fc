"""Resume-list state transitions for the dashboard.

The dashboard keeps its resumes in ``st.session_state`` as a list of
``{"id": str, "text": str}`` dicts. Every change goes through these functions,
which return a new list and never mutate their input, so Streamlit reruns see
a consistent state.
"""
from typing import Dict, List, Optional, Tuple

from screening.rubric import CRITERIA, MAX_RESUMES

Resume = Dict[str, str]


def criteria_view() -> List[Tuple[str, str, str]]:
    """(key, label, weight) for each rubric criterion, in rubric order."""
    return [(c.key, c.name, f"{c.weight}%") for c in CRITERIA]


def initial_resumes() -> List[Resume]:
    return [{"id": "1", "text": ""}]


def _next_id(resumes: List[Resume]) -> str:
    numeric = [int(r["id"]) for r in resumes if str(r["id"]).isdigit()]
    return str(max(numeric, default=0) + 1)


def can_add(resumes: List[Resume]) -> bool:
    return len(resumes) < MAX_RESUMES


def can_remove(resumes: List[Resume]) -> bool:
    return len(resumes) > 1


def add_resume(resumes: List[Resume]) -> List[Resume]:
    if not can_add(resumes):
        return list(resumes)
    return list(resumes) + [{"id": _next_id(resumes), "text": ""}]


def remove_resume(resumes: List[Resume], resume_id: str) -> List[Resume]:
    if not can_remove(resumes):
        return list(resumes)
    return [r for r in resumes if r["id"] != resume_id]


def update_resume(resumes: List[Resume], resume_id: str, text: str) -> List[Resume]:
    return [{**r, "text": text} if r["id"] == resume_id else r for r in resumes]


def valid_resumes(resumes: List[Resume]) -> List[Resume]:
    return [r for r in resumes if r["text"].strip()]


def select_initial(result: Optional[dict]) -> Optional[str]:
    """First ranked candidate of a screening result (wire form), if any."""
    if not result:
        return None
    top = result.get("topCandidates") or []
    return top[0] if top else None


def top_evaluations(result: Optional[dict]) -> List[dict]:
    if not result:
        return []
    by_id = {e["resumeId"]: e for e in result.get("evaluations", [])}
    return [by_id[rid] for rid in result.get("topCandidates", []) if rid in by_id]


def find_evaluation(result: Optional[dict], resume_id: Optional[str]) -> Optional[dict]:
    if not result or resume_id is None:
        return None
    return next((e for e in result.get("evaluations", []) if e["resumeId"] == resume_id), None)

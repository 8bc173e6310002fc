import logging
from typing import Dict, Iterable, List

from pydantic import ValidationError

from config import Settings, get_settings
from schemas import ResumeInput, ScreeningResult
from screening import llm_gemini, llm_groq
from screening.errors import InvalidScreeningInput, LLMConfigurationError, LLMResponseError
from screening.prompts import build_json_instruction, build_system_instruction, build_user_prompt
from screening.rubric import MAX_RESUMES, TOP_CANDIDATES
from screening.scorer import clean_ranking, normalize_evaluation, rank_by_total

logger = logging.getLogger(__name__)

# provider name -> (call, system instruction builder)
PROVIDERS: Dict[str, tuple] = {
    "gemini": (llm_gemini.generate_screening, build_system_instruction),
    "groq": (llm_groq.generate_screening, build_json_instruction),
}


def prepare_resumes(resumes: Iterable[ResumeInput]) -> List[ResumeInput]:
    """Drop blank entries and enforce the batch limits."""
    valid = [r for r in resumes if r.text and r.text.strip()]
    if not valid:
        raise InvalidScreeningInput("Please add at least one resume text.")
    if len(valid) > MAX_RESUMES:
        raise InvalidScreeningInput(f"At most {MAX_RESUMES} resumes can be screened at once (got {len(valid)}).")
    ids = [r.id for r in valid]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise InvalidScreeningInput(f"Duplicate resume IDs: {', '.join(duplicates)}")
    return valid


def _provider(settings: Settings) -> tuple:
    try:
        return PROVIDERS[settings.llm_provider]
    except KeyError:
        raise LLMConfigurationError(
            f"Unknown LLM_PROVIDER {settings.llm_provider!r} (expected one of: {', '.join(PROVIDERS)})"
        ) from None


def normalize_result(result: ScreeningResult, resume_ids: List[str]) -> ScreeningResult:
    known = set(resume_ids)
    evaluations = []
    seen = set()
    for evaluation in result.evaluations:
        rid = evaluation.resume_id.strip()
        if rid not in known or rid in seen:
            logger.warning(f"Dropping evaluation for unexpected or repeated resume ID {rid!r}")
            continue
        seen.add(rid)
        evaluations.append(normalize_evaluation(evaluation.model_copy(update={"resume_id": rid})))

    # input order, so ranking ties fall back to the order resumes were submitted
    position = {rid: i for i, rid in enumerate(resume_ids)}
    evaluations.sort(key=lambda e: position[e.resume_id])

    missing = [rid for rid in resume_ids if rid not in seen]
    if missing:
        logger.warning(f"Model returned no evaluation for resume(s): {', '.join(missing)}")

    ranking = clean_ranking(result.top_candidates, seen, TOP_CANDIDATES)
    if not ranking:
        ranking = rank_by_total(evaluations, TOP_CANDIDATES)

    return ScreeningResult(
        evaluations=evaluations,
        top_candidates=ranking,
        fairness_check=result.fairness_check.strip(),
    )


def screen_resumes(resumes: Iterable[ResumeInput], settings: Settings = None) -> ScreeningResult:
    """
    Evaluate a batch of resumes with the configured model in a single request.

    Blank resumes are ignored. Raises InvalidScreeningInput for an empty or
    oversized batch, LLMConfigurationError / LLMRequestError / LLMResponseError
    when the provider cannot produce a usable result.
    """
    settings = settings or get_settings()
    valid = prepare_resumes(resumes)
    call, build_instruction = _provider(settings)

    logger.info(f"Screening {len(valid)} resume(s) with {settings.llm_provider}:{settings.model_name}")
    raw = call(build_instruction(), build_user_prompt(valid), settings)
    if not isinstance(raw, dict):
        raise LLMResponseError("Model output is not a JSON object")

    try:
        result = ScreeningResult.model_validate(raw)
    except ValidationError as e:
        logger.error(f"Model output does not match the screening schema: {e.error_count()} error(s)")
        raise LLMResponseError(f"Model output does not match the screening schema: {e}") from e

    result = normalize_result(result, [r.id for r in valid])
    if not result.evaluations:
        raise LLMResponseError("Model returned no evaluations for the submitted resumes")
    logger.info(f"Screening finished; top candidates: {', '.join(result.top_candidates)}")
    return result

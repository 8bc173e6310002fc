from __future__ import annotations
import os
import logging
from typing import List
from contextlib import asynccontextmanager
from fastapi import FastAPI, UploadFile, File, HTTPException, Query, Request, Response
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from config import configure_logging, get_settings
from models import Base, ScreeningRun
from schemas import (
    CriterionOut,
    ExtractedText,
    RubricOut,
    ScreeningRequest,
    ScreeningResult,
    ScreeningRunOut,
    ScreeningRunSummary,
)
from parsers.errors import ExtractionError, UnsupportedFileType
from parsers.extract import SUPPORTED_EXTENSIONS, extract_text
from screening.errors import (
    InvalidScreeningInput,
    LLMConfigurationError,
    LLMRequestError,
    LLMResponseError,
)
from screening.rubric import CRITERIA, FAIRNESS_ATTRIBUTES, MAX_RESUMES, ROLE, TOP_CANDIDATES
from screening.service import prepare_resumes, screen_resumes

configure_logging()
logger = logging.getLogger(__name__)

engine = None
Session = sessionmaker(autoflush=False, autocommit=False, future=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the data directory and the SQLite schema on startup."""
    global engine

    settings = get_settings()
    os.makedirs(settings.base_dir, exist_ok=True)
    logger.info(f"Using base directory: {settings.base_dir}")
    logger.info(f"Database path: {settings.db_path}")
    engine = create_engine(
        f"sqlite:///{settings.db_path}", future=True, connect_args={"check_same_thread": False}
    )
    Session.configure(bind=engine)
    Base.metadata.create_all(engine)

    yield
    engine.dispose()
    logger.info("Application shutting down.")


app = FastAPI(title="FairScreen: Bias-Free Resume Evaluator", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def screening_validation_error(request: Request, exc: RequestValidationError):
    """Malformed screening batches are bad input (400), like blank or oversized ones."""
    if request.method == "POST" and request.url.path == "/screenings":
        problems = "; ".join(
            f"{'.'.join(str(p) for p in e['loc'] if p != 'body')}: {e['msg']}" for e in exc.errors()
        )
        logger.warning(f"Rejected screening request: {problems}")
        return JSONResponse(status_code=400, content={"detail": f"Invalid screening request: {problems}"})
    return await request_validation_exception_handler(request, exc)


def _run_out(run: ScreeningRun) -> ScreeningRunOut:
    return ScreeningRunOut(
        id=run.id,
        created_at=run.created_at,
        provider=run.provider,
        model=run.model,
        resume_ids=run.resume_ids,
        result=ScreeningResult.model_validate(run.result),
    )


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/rubric", response_model=RubricOut)
def rubric():
    """The fixed evaluation rubric and fairness constraints sent to the model."""
    return RubricOut(
        role=ROLE,
        criteria=[CriterionOut(key=c.key, name=c.name, weight=c.weight, focus=c.focus) for c in CRITERIA],
        fairness_attributes=FAIRNESS_ATTRIBUTES,
        max_resumes=MAX_RESUMES,
        top_candidates=TOP_CANDIDATES,
    )


@app.post("/resumes/extract", response_model=ExtractedText)
async def extract_resume(file: UploadFile = File(...)):
    """Turn an uploaded PDF, DOCX or TXT resume into plain text for review."""
    filename = file.filename or ""
    data = await file.read()
    try:
        text = extract_text(filename, data)
    except UnsupportedFileType as e:
        raise HTTPException(
            status_code=400,
            detail=f"{e}. Please upload one of: {', '.join(SUPPORTED_EXTENSIONS)}.",
        )
    except ExtractionError as e:
        logger.warning(f"Extraction failed for {filename}: {e}")
        raise HTTPException(
            status_code=422,
            detail=f"Failed to parse {filename}: {e}. Please try pasting the text manually.",
        )

    if not text:
        raise HTTPException(
            status_code=422,
            detail=f"No text found in {filename}. Please try pasting the text manually.",
        )
    return ExtractedText(filename=filename, text=text, characters=len(text))


@app.post("/screenings", response_model=ScreeningRunOut)
def create_screening(request: ScreeningRequest):
    """Screen the submitted resumes in one model call and store the result."""
    settings = get_settings()
    try:
        resumes = prepare_resumes(request.resumes)
        result = screen_resumes(resumes, settings)
    except InvalidScreeningInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LLMConfigurationError as e:
        logger.error(f"Screening provider misconfigured: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except (LLMRequestError, LLMResponseError) as e:
        logger.error(f"Screening failed: {e}")
        raise HTTPException(status_code=502, detail=f"Screening failed: {e}")

    with Session() as s:
        run = ScreeningRun(
            provider=settings.llm_provider,
            model=settings.model_name,
            resume_ids=[r.id for r in resumes],
            top_candidates=result.top_candidates,
            result=result.model_dump(by_alias=True),
        )
        s.add(run)
        s.commit()
        s.refresh(run)
        logger.info(f"Stored screening run {run.id} ({len(resumes)} resume(s))")
        return _run_out(run)


@app.get("/screenings", response_model=List[ScreeningRunSummary])
def list_screenings(limit: int = Query(20, ge=1, le=200)):
    """Past screening runs, newest first."""
    with Session() as s:
        runs = s.scalars(
            select(ScreeningRun).order_by(ScreeningRun.created_at.desc(), ScreeningRun.id.desc()).limit(limit)
        ).all()
        return [
            ScreeningRunSummary(
                id=r.id,
                created_at=r.created_at,
                provider=r.provider,
                model=r.model,
                resume_count=len(r.resume_ids or []),
                top_candidates=r.top_candidates or [],
            )
            for r in runs
        ]


@app.get("/screenings/{run_id}", response_model=ScreeningRunOut)
def get_screening(run_id: int):
    with Session() as s:
        run = s.get(ScreeningRun, run_id)
        if not run:
            raise HTTPException(status_code=404, detail=f"Screening {run_id} not found.")
        return _run_out(run)


@app.delete("/screenings/{run_id}", status_code=204)
def delete_screening(run_id: int):
    with Session() as s:
        run = s.get(ScreeningRun, run_id)
        if not run:
            raise HTTPException(status_code=404, detail=f"Screening {run_id} not found.")
        s.delete(run)
        s.commit()
    return Response(status_code=204)

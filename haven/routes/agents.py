"""Agent routes: the general assistant plus one POST per specialised capability."""
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from haven.agents.assistant import run_assistant
from haven.agents.capability import failure, run_capability
from haven.agents.learning import TUTOR, run_course, run_quiz
from haven.agents.marketing import AB_VARIANT, ANGLE
from haven.agents.production import PRODUCTION
from haven.agents.video import BROLL_KEYWORDS, SCRIPT, STORYBOARD
from haven.db import get_db
from haven.errors import HavenError
from haven.models.schemas import (
    ABTestRequest,
    AgentInput,
    AngleRequest,
    AssistantRequest,
    BrollRequest,
    PipelineRequest,
    ProductionRequest,
    ScriptRequest,
    StoryboardRequest,
    TutorRequest,
)
from haven.routes.responses import guarded
from haven.services.broll_service import BrollService
from haven.utils.logging import get_logger
from haven.workflow.graph import run_pipeline

logger = get_logger(__name__)

router = APIRouter(prefix="/agents", tags=["agents"])


@router.post("")
async def assistant(body: AssistantRequest):
    """summarize | write | orchestrate | brainstorm | transcribe."""
    return await guarded("assistant_failed", run_assistant(body.model_dump()))


@router.post("/script")
async def script(body: ScriptRequest):
    return await guarded("script_failed", run_capability(SCRIPT, body.model_dump()))


@router.post("/storyboard")
async def storyboard(body: StoryboardRequest):
    return await guarded("storyboard_failed", run_capability(STORYBOARD, body.model_dump()))


@router.post("/angle")
async def angle(body: AngleRequest):
    return await guarded("angle_failed", run_capability(ANGLE, body.model_dump()))


@router.post("/abtest")
async def abtest(body: ABTestRequest):
    async def _run():
        variant = await run_capability(AB_VARIANT, body.model_dump())
        return {"success": True, "variant": variant, "testName": f"Variant {str(int(time.time() * 1000))[-4:]}"}

    return await guarded("abtest_failed", _run(), envelope=True)


async def _envelope(event: str, runner, body: AgentInput):
    """Envelope routes answer failures with ``{success: false, error}`` and the error's status."""
    try:
        output = await runner(body.model_dump())
    except HavenError as e:
        logger.warning(event, error=e.message)
        return JSONResponse(status_code=e.status_code, content=failure(e.message).to_wire())
    except Exception as e:
        logger.exception(event, error=str(e))
        return JSONResponse(status_code=500, content=failure(str(e)).to_wire())
    return output.to_wire()


@router.post("/course")
async def course(body: AgentInput):
    """Course Architect: structure the selected nodes into modules. Suggests quiz_master next."""
    return await _envelope("course_failed", run_course, body)


@router.post("/quiz")
async def quiz(body: AgentInput):
    """Quiz Master: questions over the selected nodes, bounded by the quiz timeout."""
    return await _envelope("quiz_failed", run_quiz, body)


@router.post("/pipeline")
async def pipeline(body: PipelineRequest):
    """Chain envelope agents; returns the last success or the first failure."""
    async def _run():
        output, status = await run_pipeline(body.model_dump(exclude={"agents"}), body.agents)
        if not output.get("success"):
            return JSONResponse(status_code=status, content=output)
        return output

    return await guarded("pipeline_failed", _run(), envelope=True)


@router.post("/tutor")
async def tutor(body: TutorRequest):
    async def _run():
        reply = await run_capability(TUTOR, body.model_dump())
        return {"success": True, "reply": reply}

    return await guarded("tutor_failed", _run(), envelope=True)


@router.post("/production")
async def production(body: ProductionRequest):
    async def _run():
        plan = await run_capability(PRODUCTION, body.model_dump())
        return {"success": True, "result": plan}

    return await guarded("production_failed", _run(), envelope=True)


@router.post("/broll")
async def broll(body: BrollRequest, session: AsyncSession = Depends(get_db)):
    """Keywords from the script, then the user's uploads ranked against them."""
    async def _run():
        keywords = await run_capability(BROLL_KEYWORDS, body.model_dump())
        suggestions = await BrollService(session).suggest(body.user_id, keywords)
        logger.info("broll_suggested", keywords=len(keywords), suggestions=len(suggestions))
        return {"success": True, "keywords": keywords, "suggestions": suggestions}

    return await guarded("broll_failed", _run(), envelope=True)

"""Code check API controller."""

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from app.core.config import Settings, get_settings
from app.core.dependencies import get_current_user
from app.domains.codecheck.service import CodeCheckService
from app.schemas.codecheck import CodeCheckRequest, CodeCheckResponse

router = APIRouter(
    prefix="/api/codecheck",
    tags=["codecheck"],
    dependencies=[Depends(get_current_user)],  # Bearer token required for all routes
)


def get_codecheck_service(config: Settings = Depends(get_settings)) -> CodeCheckService:
    return CodeCheckService(config)


@router.post("", response_model=CodeCheckResponse, include_in_schema=False)
@router.post("/", response_model=CodeCheckResponse)
async def submit_requirements(
    check_request: CodeCheckRequest | None = Body(None),
    service: CodeCheckService = Depends(get_codecheck_service),
):
    """Review code against exam requirements and create Todoist tasks.

    The AI verdict is returned unmodified in ``simplifiedChecklist``.
    """
    check_request = check_request or CodeCheckRequest()
    result = await service.submit_requirements(check_request.requirements, check_request.code)
    return CodeCheckResponse(**result)


@router.get("/tes", response_class=PlainTextResponse)
async def tes():
    return "tes"

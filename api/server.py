"""
HTTP API for drafting and sending emails

Routes:
    GET  /api/health          service status and collaborator availability
    POST /api/generate-email  prompt -> draft
    POST /api/send-email      reviewed draft -> delivery receipt
"""
from contextlib import asynccontextmanager
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas import (
    ErrorOut,
    GenerateEmailIn,
    GenerateEmailOut,
    HealthOut,
    SendEmailIn,
    SendEmailOut,
)
from config.settings import settings
from layer_1_composition.generation_pipeline import GenerationPipeline
from layer_2_delivery.delivery_pipeline import DeliveryPipeline
from layer_2_delivery.email_sender import EmailSender
from models.errors import ErrorKind, PipelineError
from utils.llm_client import LLMClient
from utils.logger import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.MISSING_FIELD: 400,
    ErrorKind.INVALID_RECIPIENTS: 400,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.UPSTREAM_FAILURE: 500,
    ErrorKind.TRANSPORT_FAILURE: 500,
}

ERROR_RESPONSES = {
    400: {"model": ErrorOut},
    500: {"model": ErrorOut},
    503: {"model": ErrorOut},
}


def build_pipelines() -> Tuple[GenerationPipeline, DeliveryPipeline]:
    """
    Construct both collaborators once and wrap them in pipelines

    A collaborator that cannot be initialized is recorded as unavailable
    (None) instead of failing startup, so the other half keeps working.
    """
    try:
        llm_client: Optional[LLMClient] = LLMClient()
    except ValueError as e:
        logger.warning(f"Email generation disabled: {e}")
        llm_client = None

    sender: Optional[EmailSender] = EmailSender(
        smtp_server=settings.SMTP_SERVER,
        smtp_port=settings.SMTP_PORT,
        smtp_username=settings.SMTP_USERNAME,
        smtp_password=settings.SMTP_PASSWORD,
        use_tls=settings.SMTP_USE_TLS,
    )
    if not sender.is_configured():
        logger.warning("Email sending disabled: SMTP credentials not configured")
        sender = None

    return GenerationPipeline(llm_client), DeliveryPipeline(sender, from_email=settings.FROM_EMAIL)


def error_response(error: PipelineError) -> JSONResponse:
    return JSONResponse(status_code=STATUS_BY_KIND.get(error.kind, 500), content=error.to_dict())


def get_generation_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.generation_pipeline


def get_delivery_pipeline(request: Request) -> DeliveryPipeline:
    return request.app.state.delivery_pipeline


router = APIRouter(prefix="/api", tags=["Email"])


@router.get("/health", response_model=HealthOut)
async def health(
    generation: GenerationPipeline = Depends(get_generation_pipeline),
    delivery: DeliveryPipeline = Depends(get_delivery_pipeline),
):
    return HealthOut(services={"generation": generation.available, "delivery": delivery.available})


@router.post("/generate-email", response_model=GenerateEmailOut, responses=ERROR_RESPONSES)
async def generate_email(
    inb: GenerateEmailIn,
    pipeline: GenerationPipeline = Depends(get_generation_pipeline),
):
    try:
        draft = await pipeline.generate(inb.prompt or "")
    except PipelineError as e:
        return error_response(e)

    return GenerateEmailOut(
        subject=draft.subject,
        emailBody=draft.body,
        fullContent=draft.raw_content,
        parseDegraded=draft.parse_degraded,
    )


@router.post("/send-email", response_model=SendEmailOut, responses=ERROR_RESPONSES)
async def send_email(
    inb: SendEmailIn,
    pipeline: DeliveryPipeline = Depends(get_delivery_pipeline),
):
    try:
        receipt = await pipeline.send(inb.recipients or "", inb.subject or "", inb.emailBody or "")
    except PipelineError as e:
        return error_response(e)

    return SendEmailOut(messageId=receipt.message_id, recipients=list(receipt.recipients))


def create_app(generation_pipeline: Optional[GenerationPipeline] = None,
               delivery_pipeline: Optional[DeliveryPipeline] = None) -> FastAPI:
    """
    Build the FastAPI app

    Args:
        generation_pipeline: Pipeline to use; built from settings at startup if omitted
        delivery_pipeline: Pipeline to use; built from settings at startup if omitted

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.generation_pipeline is None or app.state.delivery_pipeline is None:
            generation, delivery = build_pipelines()
            if app.state.generation_pipeline is None:
                app.state.generation_pipeline = generation
            if app.state.delivery_pipeline is None:
                app.state.delivery_pipeline = delivery
        logger.info(f"Server is running on http://{settings.HOST}:{settings.PORT}")
        logger.info(
            f"Generation available: {app.state.generation_pipeline.available}, "
            f"delivery available: {app.state.delivery_pipeline.available}"
        )
        yield

    app = FastAPI(
        title="AI Email Composer",
        version="0.1.0",
        description="Draft emails with Gemini, review them, send them over SMTP.",
        lifespan=lifespan,
    )
    app.state.generation_pipeline = generation_pipeline
    app.state.delivery_pipeline = delivery_pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": str(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            logger.info(f"404 - Route not found: {request.url.path}")
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def _unhandled_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(router)
    return app


app = create_app()

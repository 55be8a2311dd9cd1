from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging
import httpx
from time import perf_counter
from typing import List
from .config import Settings, settings as default_settings
from .errors import TriviaError, UpstreamRateLimitedError, UpstreamRejectedError
from .models import (
	CheckAnswerRequest,
	CheckAnswerResponse,
	GetQuestionsParameters,
	HealthResponse,
	NotFoundResponse,
	QuestionDifficulty,
	QuestionType,
	TriviaQuestionResponse,
)
from .state import AnswerStore
from .services.opentdb_client import OpenTdbClient
from .services.trivia_service import QuestionSource, TriviaService

logging.basicConfig(level=default_settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger("trivia_proxy")

router = APIRouter()

def get_answer_store(request: Request) -> AnswerStore:
	return request.app.state.answer_store

def get_trivia_service(request: Request) -> TriviaService:
	# One coordinator per request around the process-wide store.
	return TriviaService(request.app.state.question_source, request.app.state.answer_store)

def _status_for(exc: TriviaError) -> int:
	if isinstance(exc, UpstreamRateLimitedError):
		return 429
	if isinstance(exc, UpstreamRejectedError):
		return 400
	return 502

async def trivia_error_handler(request: Request, exc: TriviaError):
	status_code = _status_for(exc)
	logger.warning({
		"event": "request_failed",
		"path": request.url.path,
		"error": exc.code,
		"status_code": status_code,
		"message": str(exc),
	})
	return ORJSONResponse(status_code=status_code, content={"detail": exc.code, "message": str(exc)})

async def validation_error_handler(request: Request, exc: RequestValidationError):
	logger.debug({"event": "invalid_request", "path": request.url.path, "errors": len(exc.errors())})
	return ORJSONResponse(status_code=400, content={"detail": "invalid_request", "errors": jsonable_encoder(exc.errors())})

@router.get("/api/questions", response_model=List[TriviaQuestionResponse])
async def get_questions(
	request: Request,
	amount: int = Query(..., ge=1),
	category_id: int | None = Query(None, alias="categoryId", ge=1),
	difficulty: QuestionDifficulty | None = None,
	type: QuestionType | None = None,
	service: TriviaService = Depends(get_trivia_service),
):
	max_amount = request.app.state.settings.max_question_amount
	if amount > max_amount:
		raise HTTPException(status_code=400, detail=f"amount must be between 1 and {max_amount}")
	parameters = GetQuestionsParameters(amount=amount, category_id=category_id, difficulty=difficulty, type=type)
	return await service.get_questions(parameters)

@router.post(
	"/api/checkanswers",
	response_model=CheckAnswerResponse,
	responses={404: {"model": NotFoundResponse}},
)
def check_answer(payload: CheckAnswerRequest, service: TriviaService = Depends(get_trivia_service)):
	result = service.check_answer(payload)
	if result is None:
		return ORJSONResponse(
			status_code=404,
			content={"message": f"Question '{payload.question_id}' not found. It may have already been answered or the ID is invalid."},
		)
	return result

@router.get("/health", response_model=HealthResponse)
def health(answer_store: AnswerStore = Depends(get_answer_store)):
	return HealthResponse(status="ok", pending_answers=answer_store.count())

def create_app(
	settings: Settings | None = None,
	question_source: QuestionSource | None = None,
	answer_store: AnswerStore | None = None,
) -> FastAPI:
	settings = settings or default_settings
	logger.setLevel(settings.log_level)
	app = FastAPI(
		title="Trivia Proxy",
		description="Sits between the frontend and the Open Trivia Database. Correct answers stay on the server until the user commits to a choice.",
		default_response_class=ORJSONResponse,
	)
	app.state.settings = settings
	app.state.answer_store = answer_store if answer_store is not None else AnswerStore()
	owned_http: httpx.AsyncClient | None = None
	if question_source is None:
		owned_http = httpx.AsyncClient(timeout=settings.opentdb_timeout_seconds)
		question_source = OpenTdbClient(owned_http, base_url=settings.opentdb_base_url, timeout=settings.opentdb_timeout_seconds)
	app.state.question_source = question_source

	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.cors_allow_origins,
		allow_credentials=False,
		allow_methods=["*"],
		allow_headers=["*"],
	)
	app.add_exception_handler(TriviaError, trivia_error_handler)
	app.add_exception_handler(RequestValidationError, validation_error_handler)
	app.include_router(router)

	@app.on_event("startup")
	def on_startup() -> None:
		logger.info({
			"event": "api_startup",
			"opentdb_base_url": settings.opentdb_base_url,
			"timeout_seconds": settings.opentdb_timeout_seconds,
			"max_question_amount": settings.max_question_amount,
		})

	@app.on_event("shutdown")
	async def on_shutdown() -> None:
		if owned_http is not None:
			await owned_http.aclose()
		logger.info({"event": "api_shutdown", "pending_answers": app.state.answer_store.count()})

	@app.middleware("http")
	async def timing_middleware(request: Request, call_next):
		start = perf_counter()
		response = await call_next(request)
		duration_ms = int((perf_counter() - start) * 1000)
		logger.debug({
			"event": "request_timing",
			"method": request.method,
			"path": request.url.path,
			"status_code": response.status_code,
			"duration_ms": duration_ms,
		})
		return response

	return app

app = create_app()

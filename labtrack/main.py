# labtrack/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from labtrack import API_PREFIX
from labtrack.core.config import settings
from labtrack.core import dependencies as deps
from labtrack.storage import create_storage
from labtrack.storage.seed import seed_default_data

# 각 도메인의 라우터들을 임포트합니다.
from labtrack.domains.usr.routers import router as usr_router
from labtrack.domains.lab.routers import router as lab_router
from labtrack.domains.transport.routers import router as transport_router
from labtrack.domains.shared.routers import router as shared_router
from labtrack.domains.rpt.routers import router as rpt_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    저장소를 한 번 생성하여 app.state.storage에 보관하고, 종료 시 자원을 해제합니다.
    """
    logger.info("FastAPI 애플리케이션 시작 중... (storage backend: %s)", settings.STORAGE_BACKEND)
    storage = create_storage(settings)
    try:
        await storage.initialize()
        if settings.SEED_DEFAULT_DATA:
            await seed_default_data(storage, settings.DEFAULT_ADMIN_PASSWORD.get_secret_value())
    except Exception as e:
        logger.error("애플리케이션 시작 중 오류 발생: %s", e)
        await storage.close()
        raise
    app.state.storage = storage

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    await storage.close()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,  # access_token 쿠키 전달 허용
    allow_methods=["*"],
    allow_headers=["*"],
)


# -- 예외 처리기 --
def jsonable_errors(errors):
    # pydantic 오류의 ctx에는 예외 객체가 들어 있을 수 있어 필요한 키만 남깁니다.
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors]


# 모든 오류 응답은 {"message": ...} 형태로 직렬화됩니다.
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message, "errors": jsonable_errors(errors)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("처리되지 않은 예외: %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


# -- 도메인 라우터 포함 --
app.include_router(usr_router, prefix=API_PREFIX)
app.include_router(lab_router, prefix=API_PREFIX)
app.include_router(transport_router, prefix=API_PREFIX)
app.include_router(shared_router, prefix=API_PREFIX)
app.include_router(rpt_router, prefix=API_PREFIX)


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and storage.")
async def health_check(storage: deps.IStorage = Depends(deps.get_storage)):
    """
    저장소 연결을 확인하여 서비스의 정상 작동 여부를 반환합니다.
    """
    if not await storage.ping():
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Storage health check failed",
        )
    return {"status": "ok", "storage": settings.STORAGE_BACKEND}


# -- Uvicorn 서버 직접 실행 (개발용) --
# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("labtrack.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")

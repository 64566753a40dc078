"""
FastAPI 애플리케이션

라우터 등록, 에러 매핑 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.domain.errors import BackendRejected, SessionInvalid, SyncError, UpstreamUnavailable
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.dependencies import close_clients
from web.routes import auth, company, health, records, sync

logger = logging.getLogger(__name__)

# 에러 종류 → HTTP 상태 코드
ERROR_STATUS: dict[type[SyncError], int] = {
    SessionInvalid: 401,
    UpstreamUnavailable: 502,
    BackendRejected: 422,
}


def status_for(error: SyncError) -> int:
    """에러 → HTTP 상태 코드 (매핑에 없으면 500)"""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    yield
    # 종료 시 - 리소스 정리
    await close_clients()


app = FastAPI(
    title="Hedera QBO Sync API",
    description="Hedera Mirror Node → QuickBooks Online 동기화 API",
    version=health.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SyncError)
async def sync_error_handler(request: Request, exc: SyncError) -> JSONResponse:
    """SyncError → 구조화된 JSON 에러"""
    status_code = status_for(exc)
    logger.warning(
        f"{request.method} {request.url.path} 실패: {exc.kind}",
        extra={"status_code": status_code, "error": exc.message},
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(sync.router)
app.include_router(records.router)
app.include_router(company.router)

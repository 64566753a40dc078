"""
회사 정보 API

GET /api/company - 연결된 QBO 회사 정보
"""

from typing import Any

from fastapi import APIRouter, Depends

from adapters.interfaces import IQboClient
from web.dependencies import get_qbo_client

router = APIRouter(prefix="/api/company", tags=["company"])


@router.get("")
async def get_company_info(qbo: IQboClient = Depends(get_qbo_client)) -> dict[str, Any]:
    """QBO CompanyInfo 원본 반환"""
    return await qbo.get_company_info()

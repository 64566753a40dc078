"""
QBO 계정 디렉토리

Hedera 계정 ↔ QBO 계정 매핑 (이름 기반 find-or-create).
실행 단위 dict 캐시만 사용하고, 영속 캐시는 두지 않는다.
"""

import logging

from adapters.interfaces import IQboClient
from adapters.qbo.query import select_account_by_name
from core.constants import LedgerAccountNames

logger = logging.getLogger(__name__)


def wallet_account_name(hedera_id: str) -> str:
    """Hedera 지갑 계정 이름

    Example:
        >>> wallet_account_name("0.0.100")
        'Hedera 0.0.100'
    """
    return f"{LedgerAccountNames.WALLET_PREFIX} {hedera_id}"


class LedgerAccountDirectory:
    """QBO 계정 find-or-create

    Args:
        client: QBO 클라이언트
    """

    def __init__(self, client: IQboClient):
        self.client = client
        self._ids: dict[str, str] = {}

    async def get_or_create(
        self,
        name: str,
        account_type: str,
        account_sub_type: str | None = None,
    ) -> str:
        """이름으로 계정 조회, 없으면 생성

        Args:
            name: 계정 이름
            account_type: QBO AccountType (Bank, Income 등)
            account_sub_type: QBO AccountSubType (선택)

        Returns:
            QBO 계정 Id
        """
        cached = self._ids.get(name)
        if cached is not None:
            return cached

        response = await self.client.query(select_account_by_name(name))
        found = (response.get("Account") or [None])[0]

        if found and found.get("Id"):
            account_id = str(found["Id"])
            logger.debug(f"QBO 계정 조회: {name} → {account_id}")
        else:
            payload = {"Name": name, "AccountType": account_type}
            if account_sub_type:
                payload["AccountSubType"] = account_sub_type

            logger.info(f"QBO 계정 생성: {name} ({account_type})")
            created = await self.client.create("Account", payload)
            account_id = str(created["Id"])

        self._ids[name] = account_id
        return account_id

    async def wallet(self, hedera_id: str) -> str:
        """Hedera 지갑 계정 (Bank)"""
        return await self.get_or_create(
            wallet_account_name(hedera_id),
            LedgerAccountNames.WALLET_TYPE,
        )

    async def clearing(self) -> str:
        """입금 상대 계정 (Income)"""
        return await self.get_or_create(
            LedgerAccountNames.CLEARING_NAME,
            LedgerAccountNames.CLEARING_TYPE,
        )

    async def external_outflow(self) -> str:
        """외부 유출 계정 (Bank)"""
        return await self.get_or_create(
            LedgerAccountNames.OUTFLOW_NAME,
            LedgerAccountNames.OUTFLOW_TYPE,
        )

"""
회계 레코드 생성 (Effect Writer)

PrivateNote에 idempotency key를 담아 Deposit / Transfer 생성.
Fault는 BackendRejected로 그대로 전파 (자동 재시도 없음).
"""

import logging

from adapters.interfaces import IQboClient
from adapters.models import AccountingRecordRef
from sync.effects import AccountingEffect

logger = logging.getLogger(__name__)


class EffectWriter:
    """QBO 레코드 생성기

    Args:
        client: QBO 클라이언트
    """

    def __init__(self, client: IQboClient):
        self.client = client

    async def create(self, effect: AccountingEffect) -> AccountingRecordRef:
        """회계 효과를 QBO 레코드로 생성

        Args:
            effect: 생성할 회계 효과 (key 포함)

        Returns:
            생성된 레코드 참조

        Raises:
            BackendRejected: QBO Fault
        """
        descriptor = effect.descriptor
        payload = descriptor.build_payload(effect)

        logger.info(
            f"QBO {descriptor.entity} 생성 요청: {effect.amount} HBAR "
            f"({effect.from_label or effect.from_account_id} → "
            f"{effect.to_label or effect.to_account_id})",
            extra={"key": effect.key, "txn_date": effect.txn_date.isoformat()},
        )

        created = await self.client.create(descriptor.entity, payload)

        return AccountingRecordRef(
            entity=descriptor.entity,
            record_id=str(created.get("Id", "")),
            sync_token=created.get("SyncToken"),
            raw=created,
        )

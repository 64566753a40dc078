"""
중복 확인 (Duplicate Resolver)

QBO는 PrivateNote로 필터링할 수 없으므로:
1) 같은 TxnDate의 레코드를 Id, PrivateNote와 함께 조회 (상한 있음)
2) PrivateNote == key 인 후보가 있으면 이미 존재하는 것으로 판단

금액/계정 참조 필터는 엔티티별 동작이 일정하지 않아 사용하지 않는다.
상한에 도달하면 같은 날짜의 일부 중복을 놓칠 수 있다 (경고 로그).
"""

import logging

from adapters.interfaces import IQboClient
from adapters.qbo.query import select_by_txn_date
from core.constants import Defaults
from sync.effects import AccountingEffect

logger = logging.getLogger(__name__)


class DuplicateResolver:
    """QBO 중복 레코드 확인

    Args:
        client: QBO 클라이언트
        candidate_cap: 같은 날짜 후보 조회 상한
    """

    def __init__(
        self,
        client: IQboClient,
        candidate_cap: int = Defaults.CANDIDATE_QUERY_CAP,
    ):
        self.client = client
        self.candidate_cap = candidate_cap

    async def exists(self, effect: AccountingEffect) -> bool:
        """같은 key의 레코드가 QBO에 존재하는지 확인

        Args:
            effect: 확인할 회계 효과

        Returns:
            True if PrivateNote가 정확히 일치하는 후보 존재
        """
        descriptor = effect.descriptor
        statement = select_by_txn_date(
            entity=descriptor.entity,
            txn_date=effect.txn_date,
            max_results=self.candidate_cap,
            fields=f"Id, {descriptor.note_field}",
            date_field=descriptor.date_field,
        )

        response = await self.client.query(statement)
        candidates = response.get(descriptor.entity) or []

        logger.debug(
            f"{descriptor.entity} 중복 후보: {len(candidates)}건",
            extra={"txn_date": effect.txn_date.isoformat(), "key": effect.key},
        )

        if len(candidates) >= self.candidate_cap:
            logger.warning(
                f"{descriptor.entity} 후보 조회가 상한({self.candidate_cap})에 도달: "
                f"일부 중복을 놓칠 수 있음",
                extra={"txn_date": effect.txn_date.isoformat()},
            )

        for candidate in candidates:
            if candidate.get(descriptor.note_field) == effect.key:
                logger.info(
                    f"{descriptor.entity} 이미 존재: Id={candidate.get('Id')}",
                    extra={"key": effect.key},
                )
                return True

        return False

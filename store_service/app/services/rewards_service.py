from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..exceptions import RewardNotFoundError
from ..models.reward import Reward, RewardCreateInput, RewardUpdateInput
from ..repositories.interfaces import RewardRepositoryInterface
from ..repositories.reward_repository import RewardRepository


logger = logging.getLogger(__name__)


class RewardsService:
    """크레딧 리워드 카탈로그 관리.

    비용을 바꿔도 이미 생성된 교환 요청의 스냅샷(환불 기준)은 바뀌지 않는다.
    """

    def __init__(self, repo: RewardRepositoryInterface) -> None:
        self._repo = repo

    def list_available(self) -> list[Reward]:
        return self._repo.list(available_only=True)

    def list_all(self) -> list[Reward]:
        return self._repo.list()

    def get_reward(self, reward_id: str) -> Reward:
        reward = self._repo.find_by_id(reward_id)
        if reward is None:
            raise RewardNotFoundError()
        return reward

    def create_reward(self, input_model: RewardCreateInput) -> Reward:
        now = datetime.now(timezone.utc)
        reward = Reward(**input_model.model_dump(), created_at=now, updated_at=now)
        created = self._repo.insert(reward)
        logger.info("reward created: %s (%s)", created.name, created.id)
        return created

    def update_reward(self, reward_id: str, changes: RewardUpdateInput) -> Reward:
        fields = {
            key: value
            for key, value in changes.model_dump(exclude_unset=True, mode="json").items()
            if value is not None
        }
        if not fields:
            return self.get_reward(reward_id)

        updated = self._repo.update(reward_id, fields)
        if updated is None:
            raise RewardNotFoundError()
        logger.info("reward updated: %s", reward_id)
        return updated

    def delete_reward(self, reward_id: str) -> None:
        if not self._repo.delete(reward_id):
            raise RewardNotFoundError()
        logger.info("reward deleted: %s", reward_id)


def get_reward_repository(
    db: Database = Depends(get_database),
) -> RewardRepositoryInterface:
    return RewardRepository(db)


def get_rewards_service(
    repo: RewardRepositoryInterface = Depends(get_reward_repository),
) -> RewardsService:
    return RewardsService(repo)

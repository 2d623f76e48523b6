from enum import Enum
from typing import Awaitable, Callable, Optional
from github_manager.github.client import GitHubClient, GitHubDecodeError, GitHubError
from github_manager.github.decoders import (
    decode_created_item_id,
    decode_created_project_url,
    decode_owner_id,
)
from github_manager.github.mutations import (
    ADD_DRAFT_ISSUE,
    CREATE_PROJECT,
    UPDATE_ITEM_DATE,
    UPDATE_ITEM_SINGLE_SELECT,
)
from github_manager.github.queries import GET_OWNER_ID
from github_manager.utils.logger import get_logger
from github_manager.utils.signals import ManagerSignals

logger = get_logger(__name__)

RefreshCallback = Callable[[str], Awaitable[None]]


class PipelineStage(str, Enum):
    """複数ステップのミューテーションの待機段階（失敗箇所のログに使用）"""

    AWAITING_OWNER_ID = "awaiting_owner_id"
    AWAITING_PROJECT_CREATION = "awaiting_project_creation"
    AWAITING_ITEM_CREATION = "awaiting_item_creation"
    AWAITING_STATUS_UPDATE = "awaiting_status_update"
    AWAITING_DATE_UPDATE = "awaiting_date_update"


def normalize_date(value: str) -> str:
    """時刻を含まない日付をUTC午前0時のISO-8601形式に変換

    Args:
        value: 日付文字列（例: 2024-05-10）

    Returns:
        str: ISO-8601文字列（既に時刻を含む場合はそのまま）
    """
    if "T" in value:
        return value
    return f"{value}T00:00:00.000Z"


class MutationOrchestrator:
    """依存関係のあるGraphQLミューテーションを順番に実行

    各ステップは前のステップの結果を await してから実行されます。
    途中で失敗した場合はそこで終了し、mutation_completed(False) を通知します。
    ロールバックは行いません。
    """

    def __init__(
        self,
        client: GitHubClient,
        signals: ManagerSignals,
        refresh_project: RefreshCallback,
    ):
        self.client = client
        self.signals = signals
        self.refresh_project = refresh_project

    def _fail(self, operation: str, stage: PipelineStage, error: Exception):
        logger.error(f"{operation} failed at {stage.value}: {error}")
        self.signals.mutation_completed.emit(False)

    async def create_new_project(self, owner: str, title: str) -> Optional[str]:
        """オーナーIDを取得してProject v2を作成

        Returns:
            Optional[str]: 作成したプロジェクトのURL（失敗時はNone）
        """
        try:
            stage = PipelineStage.AWAITING_OWNER_ID
            data = await self.client.execute_query(GET_OWNER_ID, {"login": owner})
            owner_id = decode_owner_id(data)

            stage = PipelineStage.AWAITING_PROJECT_CREATION
            data = await self.client.execute_mutation(
                CREATE_PROJECT, {"ownerId": owner_id, "title": title}
            )
            project_url = decode_created_project_url(data)
        except GitHubError as e:
            self._fail("create_new_project", stage, e)
            return None

        logger.info(f"Created project '{title}' for {owner}: {project_url}")
        self.signals.project_created.emit(project_url)
        self.signals.mutation_completed.emit(True)
        return project_url

    async def create_project_item(
        self, project_id: str, title: str, field_id: str, column_id: str
    ) -> Optional[str]:
        """ドラフトアイテムを作成し、Statusを設定

        2番目のミューテーションが失敗した場合、作成済みのドラフトアイテムは
        Status未設定のままGitHub上に残ります。

        Returns:
            Optional[str]: 作成したアイテムID（失敗時はNone）
        """
        logger.info(f"Creating new project item with title: {title}")
        try:
            stage = PipelineStage.AWAITING_ITEM_CREATION
            data = await self.client.execute_mutation(
                ADD_DRAFT_ISSUE, {"projectId": project_id, "title": title}
            )
            item_id = decode_created_item_id(data)
            if not item_id:
                raise GitHubDecodeError("Project item not found in response")

            stage = PipelineStage.AWAITING_STATUS_UPDATE
            await self.client.execute_mutation(
                UPDATE_ITEM_SINGLE_SELECT,
                {
                    "projectId": project_id,
                    "itemId": item_id,
                    "fieldId": field_id,
                    "optionId": column_id,
                },
            )
        except GitHubError as e:
            self._fail("create_project_item", stage, e)
            return None

        self.signals.item_created.emit()
        await self.refresh_project(project_id)
        return item_id

    async def update_project_item_date_value(
        self, project_id: str, item_id: str, field_id: str, new_date: str
    ) -> bool:
        """日付フィールドを更新

        キャッシュは更新しないため、反映を確認するにはプロジェクト詳細を再取得します。
        """
        formatted_date = normalize_date(new_date)
        try:
            stage = PipelineStage.AWAITING_DATE_UPDATE
            data = await self.client.execute_mutation(
                UPDATE_ITEM_DATE,
                {
                    "projectId": project_id,
                    "itemId": item_id,
                    "fieldId": field_id,
                    "date": formatted_date,
                },
            )
        except GitHubError as e:
            self._fail("update_project_item_date_value", stage, e)
            return False

        logger.info(f"Date field {field_id} of item {item_id} set to {formatted_date}")
        logger.debug(f"Response received: {data}")
        self.signals.mutation_completed.emit(True)
        return True

    async def move_project_item(
        self, project_id: str, item_id: str, new_column_id: str, status_field_id: str
    ) -> bool:
        """アイテムのStatus（カラム）を変更"""
        try:
            stage = PipelineStage.AWAITING_STATUS_UPDATE
            await self.client.execute_mutation(
                UPDATE_ITEM_SINGLE_SELECT,
                {
                    "projectId": project_id,
                    "itemId": item_id,
                    "fieldId": status_field_id,
                    "optionId": new_column_id,
                },
            )
        except GitHubError as e:
            self._fail("move_project_item", stage, e)
            return False

        logger.info(f"Moved item {item_id} to column {new_column_id}")
        self.signals.mutation_completed.emit(True)
        return True

"""UIレイヤー向けのGitHub APIマネージャー

トークン・キャッシュ・通知を保持し、REST（リポジトリ）とGraphQL（Project v2）の
操作を提供します。公開メソッドはすべてコルーチンで、例外を送出せず、
失敗はログと通知で報告します。
"""

import asyncio
from typing import Any, Coroutine, Dict, List, Optional, Set
import requests
from github_manager.config import Settings
from github_manager.github.client import GitHubAuthError, GitHubClient, GitHubError
from github_manager.github.decoders import (
    decode_project_columns,
    decode_project_details,
    decode_repository,
    decode_repository_list,
    decode_user_projects,
    decode_viewer_login,
)
from github_manager.github.models import ProjectColumn, ProjectInfo, RepositoryInfo
from github_manager.github.orchestrator import MutationOrchestrator
from github_manager.github.queries import (
    GET_PROJECT_COLUMNS,
    GET_PROJECT_DETAILS,
    GET_USER_PROJECTS,
    GET_VIEWER_LOGIN,
)
from github_manager.utils.json_fields import get_string_field
from github_manager.utils.logger import get_logger, redact_token
from github_manager.utils.signals import ManagerSignals

logger = get_logger(__name__)


class GitHubManager:
    """GitHub APIマネージャー

    Examples:
        async with GitHubManager(token) as manager:
            manager.signals.repositories_loaded.connect(on_loaded)
            await manager.fetch_user_repositories()
    """

    def __init__(
        self,
        token: str = "",
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
    ):
        self.client = GitHubClient(token=token, session=session, settings=settings)
        self.signals = ManagerSignals()
        self.orchestrator = MutationOrchestrator(
            self.client, self.signals, self._refresh_project_by_id
        )
        self._repositories: Dict[str, RepositoryInfo] = {}
        self._active_repository: Optional[RepositoryInfo] = None
        self._projects: Dict[str, ProjectInfo] = {}
        self._tasks: Set[asyncio.Task] = set()

    # --- lifecycle ---

    async def start(self):
        """現在のイベントループに通知をバインド"""
        self.signals.bind_loop(asyncio.get_running_loop())

    async def close(self):
        """実行中の操作の完了を待ってセッションを閉じる"""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self.signals.bind_loop(None)
        self.client.close()

    async def __aenter__(self) -> "GitHubManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def dispatch(self, operation: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """操作をバックグラウンドで実行（呼び出し元は待たない）"""
        task = asyncio.get_running_loop().create_task(operation)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # --- token ---

    @property
    def access_token(self) -> str:
        return self.client.token

    def initialize_integration(self, token: str):
        logger.info(f"User Access Token: {redact_token(token)}")
        self.set_access_token(token)

    def set_access_token(self, token: str):
        self.client.token = token
        if not token:
            logger.error("Access Token is empty. Requests will be rejected.")
            return
        logger.info("Access Token has been set.")

    def _require_token(self, operation: str):
        if not self.client.token:
            raise GitHubAuthError(f"Access Token is empty. Cannot {operation}.")

    # --- cache accessors ---

    def get_repository_list(self) -> List[RepositoryInfo]:
        return [repo.model_copy() for repo in self._repositories.values()]

    def get_active_repository(self) -> Optional[RepositoryInfo]:
        if self._active_repository is None:
            return None
        return self._active_repository.model_copy()

    def get_user_projects(self) -> List[ProjectInfo]:
        return [project.model_copy(deep=True) for project in self._projects.values()]

    def get_project(self, title: str) -> Optional[ProjectInfo]:
        project = self._projects.get(title)
        return project.model_copy(deep=True) if project else None

    # --- REST ---

    async def fetch_user_repositories(self) -> Optional[List[RepositoryInfo]]:
        """認証ユーザーのリポジトリ一覧を取得してキャッシュを再構築

        Returns:
            Optional[List[RepositoryInfo]]: リポジトリ一覧（失敗時はNone）
        """
        try:
            self._require_token("retrieve repositories")
            payload = await self.client.request_json("GET", "/user/repos")
            repositories = decode_repository_list(payload)
        except GitHubError as e:
            logger.error(f"fetch_user_repositories failed: {e}")
            return None

        self._repositories = {repo.repository_name: repo for repo in repositories}
        values = self.get_repository_list()
        logger.info(f"Loaded {len(values)} repositories")
        self.signals.repositories_loaded.emit(values)
        return values

    async def fetch_repository_details(self, repository_name: str) -> Optional[RepositoryInfo]:
        """キャッシュ済みリポジトリの詳細を取得

        Args:
            repository_name: リポジトリ名（キャッシュのキー）
        """
        selected = self._repositories.get(repository_name)
        if selected is None:
            logger.error(f"Repository {repository_name} not found!")
            return None

        try:
            self._require_token("fetch repository details")
            payload = await self.client.request_json(
                "GET", f"/repos/{selected.owner}/{selected.repository_name}"
            )
        except GitHubError as e:
            logger.error(f"fetch_repository_details failed: {e}")
            return None

        self._active_repository = decode_repository(payload)
        repository = self._active_repository.model_copy()
        self.signals.repository_details_loaded.emit(repository)
        return repository

    async def create_repository_project(
        self, repository_name: str, project_name: str, body: str = ""
    ) -> Optional[str]:
        """Classic ProjectをREST APIで作成（旧API）

        Returns:
            Optional[str]: 作成したプロジェクトのURL
        """
        selected = self._repositories.get(repository_name)
        if selected is None:
            logger.error(f"Repository {repository_name} not found!")
            self.signals.mutation_completed.emit(False)
            return None

        try:
            self._require_token("create a project")
            payload = await self.client.request_json(
                "POST",
                f"/repos/{selected.owner}/{selected.repository_name}/projects",
                payload={"name": project_name, "body": body},
                expected_status=(200, 201),
            )
        except GitHubError as e:
            logger.error(f"create_repository_project failed: {e}")
            self.signals.mutation_completed.emit(False)
            return None

        project_url = get_string_field(payload, "html_url")
        logger.info(f"Created classic project '{project_name}': {project_url}")
        self.signals.project_created.emit(project_url)
        self.signals.mutation_completed.emit(True)
        return project_url

    # --- GraphQL queries ---

    async def fetch_current_user(self) -> Optional[str]:
        try:
            self._require_token("fetch user info")
            data = await self.client.execute_query(GET_VIEWER_LOGIN)
            login = decode_viewer_login(data)
        except GitHubError as e:
            logger.error(f"fetch_current_user failed: {e}")
            return None

        self.signals.user_name_received.emit(login)
        return login

    async def fetch_user_projects(self) -> Optional[List[ProjectInfo]]:
        """ログインユーザーのProject v2一覧（先頭100件）を取得してキャッシュを再構築"""
        try:
            self._require_token("fetch projects")
            data = await self.client.execute_query(GET_USER_PROJECTS)
            projects = decode_user_projects(data)
        except GitHubError as e:
            logger.error(f"fetch_user_projects failed: {e}")
            return None

        self._projects = {project.title: project for project in projects}
        logger.info(f"Loaded {len(projects)} projects")
        projects_list = [project.model_copy(deep=True) for project in projects]
        self.signals.user_projects_loaded.emit(projects_list)
        return projects_list

    async def fetch_project_details(self, title: str) -> Optional[ProjectInfo]:
        """プロジェクトのアイテム・カラム・日付を取得

        アイテム一覧は毎回すべて置き換えます。

        Args:
            title: プロジェクト名（キャッシュのキー）
        """
        cached = self._projects.get(title)
        if cached is None:
            logger.error(f"Project with name '{title}' not found.")
            return None

        try:
            self._require_token("fetch project details")
            data = await self.client.execute_query(
                GET_PROJECT_DETAILS, {"projectId": cached.project_id}
            )
            project = decode_project_details(data)
        except GitHubError as e:
            logger.error(f"fetch_project_details failed: {e}")
            return None

        self._projects[title] = project
        logger.info(f"Loaded project '{title}' with {len(project.items)} items")
        result = project.model_copy(deep=True)
        self.signals.project_details_loaded.emit(result)
        return result

    async def fetch_project_columns(self, title: str) -> Optional[List[ProjectColumn]]:
        """Statusフィールドの選択肢を取得"""
        cached = self._projects.get(title)
        if cached is None:
            logger.error(f"Project with name '{title}' not found.")
            return None

        try:
            self._require_token("fetch project columns")
            data = await self.client.execute_query(
                GET_PROJECT_COLUMNS, {"projectId": cached.project_id}
            )
            columns = decode_project_columns(data)
        except GitHubError as e:
            logger.error(f"fetch_project_columns failed: {e}")
            return None

        self.signals.project_columns_loaded.emit(title, list(columns))
        return columns

    async def _refresh_project_by_id(self, project_id: str):
        for title, project in list(self._projects.items()):
            if project.project_id == project_id:
                await self.fetch_project_details(title)
                return
        logger.debug(f"Project {project_id} not cached, skipping refresh")

    # --- GraphQL mutations ---

    def _check_mutation_token(self, operation: str) -> bool:
        try:
            self._require_token(operation)
        except GitHubAuthError as e:
            logger.error(str(e))
            self.signals.mutation_completed.emit(False)
            return False
        return True

    async def create_new_project(self, owner: str, title: str) -> Optional[str]:
        if not self._check_mutation_token("create a project"):
            return None
        return await self.orchestrator.create_new_project(owner, title)

    async def create_project_item(
        self, project_id: str, title: str, field_id: str, column_id: str
    ) -> Optional[str]:
        if not project_id:
            logger.error("Project ID is empty.")
            self.signals.mutation_completed.emit(False)
            return None
        if not self._check_mutation_token("create a project item"):
            return None
        return await self.orchestrator.create_project_item(
            project_id, title, field_id, column_id
        )

    async def update_project_item_date_value(
        self, project_id: str, item_id: str, field_id: str, new_date: str
    ) -> bool:
        if not self._check_mutation_token("update a date field"):
            return False
        return await self.orchestrator.update_project_item_date_value(
            project_id, item_id, field_id, new_date
        )

    async def move_project_item(
        self, project_id: str, item_id: str, new_column_id: str, status_field_id: str
    ) -> bool:
        if not self._check_mutation_token("move a project item"):
            return False
        return await self.orchestrator.move_project_item(
            project_id, item_id, new_column_id, status_field_id
        )

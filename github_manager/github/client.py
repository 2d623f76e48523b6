import requests
import asyncio
import json
from typing import Dict, Any, Iterable, List, Optional
from github_manager.config import Settings, settings as default_settings
from github_manager.utils.logger import get_logger
from github_manager.utils.json_fields import get_array_field, get_object_field, get_string_field

logger = get_logger(__name__)

BODY_VERBS = ("POST", "PATCH")


class GitHubError(Exception):
    """GitHub API操作エラーの基底クラス"""

    pass


class GitHubAuthError(GitHubError):
    """GitHub認証エラー（アクセストークン未設定）"""

    pass


class GitHubTransportError(GitHubError):
    """レスポンスを受け取れなかった通信エラー"""

    pass


class GitHubHTTPError(GitHubError):
    """想定外のHTTPステータス"""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Error {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class GraphQLError(GitHubError):
    """GraphQLレスポンスに errors 配列が含まれていた"""

    def __init__(self, messages: List[str]):
        super().__init__(f"GraphQL errors: {'; '.join(messages)}")
        self.messages = messages


class GitHubDecodeError(GitHubError):
    """レスポンスの形式が想定と異なる"""

    pass


class GitHubClient:
    """GitHub REST / GraphQL APIクライアント

    requestsは同期ライブラリなので、送信はイベントループのデフォルト
    エグゼキュータ（ワーカースレッド）で実行されます。
    """

    def __init__(
        self,
        token: str = "",
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self.token = token
        self.session = session or requests.Session()
        self.api_url = self.settings.GITHUB_API_URL
        self.graphql_url = self.settings.graphql_url
        self.user_agent = self.settings.GITHUB_USER_AGENT
        self.timeout = self.settings.GITHUB_REQUEST_TIMEOUT

    def build_request(self, url: str, verb: str) -> requests.Request:
        """認証ヘッダ付きのリクエストを構築（送信はしない）

        トークンが空でも Authorization ヘッダは付与されます。
        空トークンの拒否は呼び出し側の責務です。

        Args:
            url: リクエストURL
            verb: HTTPメソッド

        Returns:
            requests.Request: 構築済みリクエスト
        """
        verb = verb.upper()
        headers = {
            "Authorization": f"Bearer {self.token}",
            "User-Agent": self.user_agent,
        }
        if verb in BODY_VERBS:
            headers["Content-Type"] = "application/json"
        return requests.Request(method=verb, url=url, headers=headers)

    async def send(self, request: requests.Request) -> requests.Response:
        """リクエストを送信

        Raises:
            GitHubTransportError: レスポンスが得られなかった場合
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None,
                lambda: self.session.request(
                    method=request.method,
                    url=request.url,
                    headers=request.headers,
                    data=request.data or None,
                    timeout=self.timeout,
                ),
            )
        except requests.RequestException as e:
            raise GitHubTransportError(
                f"Request failed without a valid response: {e}"
            ) from e

    async def request_json(
        self,
        verb: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        expected_status: Iterable[int] = (200,),
    ) -> Any:
        """REST APIを呼び出してJSONを返す

        Args:
            verb: HTTPメソッド
            path: APIパス（例: /user/repos）
            payload: リクエストボディ
            expected_status: 成功とみなすステータスコード

        Returns:
            Any: パース済みJSON

        Raises:
            GitHubHTTPError: ステータスが想定外の場合
            GitHubDecodeError: JSONとしてパースできない場合
        """
        request = self.build_request(f"{self.api_url}{path}", verb)
        if payload is not None:
            request.data = json.dumps(payload)

        response = await self.send(request)
        if response.status_code not in tuple(expected_status):
            raise GitHubHTTPError(response.status_code, response.text)
        return _parse_json(response)

    async def execute_query(
        self, query: str, variables: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        """GraphQLクエリを実行

        Args:
            query: GraphQLクエリ文字列
            variables: クエリ変数

        Returns:
            Dict[str, Any]: data エンベロープの中身

        Raises:
            GraphQLError: errors 配列が含まれる場合
            GitHubHTTPError: HTTPステータスが200以外の場合
        """
        return await self._post_graphql(query, variables)

    async def execute_mutation(
        self, mutation: str, variables: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        """GraphQLミューテーションを実行（送信形式はクエリと同じ）"""
        return await self._post_graphql(mutation, variables)

    async def _post_graphql(
        self, document: str, variables: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        payload = {"query": document}
        if variables:
            payload["variables"] = variables

        request = self.build_request(self.graphql_url, "POST")
        request.data = json.dumps(payload)

        response = await self.send(request)
        if response.status_code != 200:
            raise GitHubHTTPError(response.status_code, response.text)

        data = _parse_json(response)
        if not isinstance(data, dict):
            raise GitHubDecodeError("GraphQL response is not a JSON object")

        errors = get_array_field(data, "errors")
        if errors:
            messages = [get_string_field(error, "message") for error in errors]
            for message in messages:
                logger.error(f"GraphQL error: {message}")
            raise GraphQLError(messages)

        return get_object_field(data, "data")

    def close(self):
        self.session.close()


def _parse_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise GitHubDecodeError("Failed to deserialize JSON response") from e

"""GitHub APIレスポンスをドメインモデルに変換するデコーダ群

すべてのフィールド参照は安全なアクセサ経由で行い、存在しないフィールドは
空文字・0として扱います。エンベロープ自体が欠けている場合のみ
GitHubDecodeError を送出します。
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
from github_manager.github.client import GitHubDecodeError
from github_manager.github.models import (
    DateValue,
    DraftIssueContent,
    FieldValue,
    IssueContent,
    ItemContent,
    ProjectColumn,
    ProjectInfo,
    ProjectItem,
    PullRequestContent,
    RepositoryInfo,
    SingleSelectValue,
    UnknownContent,
    UnknownFieldValue,
)
from github_manager.utils.json_fields import (
    get_array_field,
    get_int_field,
    get_object_field,
    get_string_field,
    has_field,
)

STATUS_FIELD = "Status"
START_DATE_FIELD = "StartDate"
END_DATE_FIELD = "EndDate"


# --- REST ---


def decode_repository(obj: Dict[str, Any]) -> RepositoryInfo:
    """REST のリポジトリオブジェクトを変換"""
    return RepositoryInfo(
        repository_name=get_string_field(obj, "name"),
        owner=get_string_field(get_object_field(obj, "owner"), "login"),
        description=get_string_field(obj, "description"),
        created_at=get_string_field(obj, "created_at"),
        stars=get_int_field(obj, "stargazers_count") or 0,
        forks=get_int_field(obj, "forks_count") or 0,
    )


def decode_repository_list(payload: Any) -> List[RepositoryInfo]:
    """GET /user/repos のレスポンス配列を変換

    Raises:
        GitHubDecodeError: レスポンスが配列でない場合
    """
    if not isinstance(payload, list):
        raise GitHubDecodeError("Repository list response is not a JSON array")
    return [decode_repository(obj) for obj in payload if isinstance(obj, dict)]


# --- GraphQL: viewer / projects ---


def decode_viewer_login(data: Dict[str, Any]) -> str:
    viewer = get_object_field(data, "viewer")
    if not viewer:
        raise GitHubDecodeError("Viewer data not found")
    return get_string_field(viewer, "login")


def decode_owner_id(data: Dict[str, Any]) -> str:
    owner_id = get_string_field(get_object_field(data, "repositoryOwner"), "id")
    if not owner_id:
        raise GitHubDecodeError("Repository owner id not found")
    return owner_id


def decode_user_projects(data: Dict[str, Any]) -> List[ProjectInfo]:
    """viewer.projectsV2 の一覧を変換

    Raises:
        GitHubDecodeError: projectsV2.nodes が存在しない場合
    """
    projects = get_object_field(get_object_field(data, "viewer"), "projectsV2")
    if not isinstance(projects.get("nodes"), list):
        raise GitHubDecodeError("No projects found in response")

    return [
        ProjectInfo(
            project_id=get_string_field(node, "id"),
            title=get_string_field(node, "title"),
            description=get_string_field(node, "shortDescription"),
            url=get_string_field(node, "url"),
        )
        for node in projects["nodes"]
        if isinstance(node, dict)
    ]


def decode_columns(field: Dict[str, Any]) -> List[ProjectColumn]:
    """Single-selectフィールドの options を変換"""
    return [
        ProjectColumn(
            option_id=get_string_field(option, "id"),
            name=get_string_field(option, "name"),
            color=get_string_field(option, "color"),
        )
        for option in get_array_field(field, "options")
        if isinstance(option, dict)
    ]


def decode_project_columns(data: Dict[str, Any]) -> List[ProjectColumn]:
    node = get_object_field(data, "node")
    if not node:
        raise GitHubDecodeError("Project node not found")
    return decode_columns(get_object_field(node, "field"))


# --- GraphQL: content union ---


def _decode_issue(obj: Dict[str, Any]) -> IssueContent:
    return IssueContent(
        content_id=get_string_field(obj, "id"),
        title=get_string_field(obj, "title"),
        url=get_string_field(obj, "url"),
        state=get_string_field(obj, "issueState"),
        created_at=get_string_field(obj, "createdAt"),
        body=get_string_field(obj, "body"),
    )


def _decode_pull_request(obj: Dict[str, Any]) -> PullRequestContent:
    return PullRequestContent(
        content_id=get_string_field(obj, "id"),
        title=get_string_field(obj, "title"),
        url=get_string_field(obj, "url"),
        state=get_string_field(obj, "pullRequestState"),
        created_at=get_string_field(obj, "createdAt"),
        body=get_string_field(obj, "body"),
    )


def _decode_draft_issue(obj: Dict[str, Any]) -> DraftIssueContent:
    return DraftIssueContent(
        content_id=get_string_field(obj, "id"),
        title=get_string_field(obj, "title"),
        created_at=get_string_field(obj, "createdAt"),
        body=get_string_field(obj, "body"),
    )


CONTENT_DECODERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "Issue": _decode_issue,
    "PullRequest": _decode_pull_request,
    "DraftIssue": _decode_draft_issue,
}


def decode_content(obj: Dict[str, Any]) -> ItemContent:
    """content ユニオンを __typename で振り分けて変換"""
    typename = get_string_field(obj, "__typename")
    decoder = CONTENT_DECODERS.get(typename)
    if decoder is None:
        return UnknownContent(typename=typename)
    return decoder(obj)


# --- GraphQL: field value union ---


def _decode_single_select(obj: Dict[str, Any]) -> SingleSelectValue:
    field = get_object_field(obj, "field")
    return SingleSelectValue(
        name=get_string_field(obj, "name"),
        option_id=get_string_field(obj, "optionId"),
        field_id=get_string_field(field, "id"),
        field_name=get_string_field(field, "name"),
    )


def _decode_date(obj: Dict[str, Any]) -> DateValue:
    field = get_object_field(obj, "field")
    return DateValue(
        date=get_string_field(obj, "date"),
        field_id=get_string_field(field, "id"),
        field_name=get_string_field(field, "name"),
    )


# フィールド値の型はレスポンスのキー構成で判別する
FIELD_VALUE_DECODERS: Tuple[Tuple[str, Callable[[Dict[str, Any]], Any]], ...] = (
    ("name", _decode_single_select),
    ("date", _decode_date),
)


def decode_field_value(obj: Dict[str, Any]) -> FieldValue:
    if has_field(obj, "field"):
        for key, decoder in FIELD_VALUE_DECODERS:
            if has_field(obj, key):
                return decoder(obj)
    return UnknownFieldValue()


# --- GraphQL: project details ---


def apply_field_value(item: ProjectItem, value: FieldValue) -> Optional[str]:
    """フィールド値をアイテムに反映

    Returns:
        Optional[str]: Statusフィールドの値だった場合はそのフィールドID
    """
    if isinstance(value, SingleSelectValue):
        if value.field_name == STATUS_FIELD:
            item.column_name = value.name
            item.column_id = value.option_id
            return value.field_id
    elif isinstance(value, DateValue):
        if value.field_name == START_DATE_FIELD:
            item.start_date = value.date
            item.start_date_field_id = value.field_id
        elif value.field_name == END_DATE_FIELD:
            item.end_date = value.date
            item.end_date_field_id = value.field_id
    return None


def apply_content(item: ProjectItem, content: ItemContent):
    item.content = content
    if isinstance(content, UnknownContent):
        item.type = content.typename
        return
    item.type = content.kind
    item.title = content.title
    item.url = content.url
    item.state = content.state
    item.created_at = content.created_at
    item.body = content.body


def decode_project_item(obj: Dict[str, Any]) -> Tuple[ProjectItem, str]:
    """プロジェクトアイテムを変換

    Returns:
        Tuple[ProjectItem, str]: アイテムと、最初に見つかったStatusフィールドID
    """
    item = ProjectItem(item_id=get_string_field(obj, "id"))
    status_field_id = ""

    for node in get_array_field(get_object_field(obj, "fieldValues"), "nodes"):
        if not isinstance(node, dict):
            continue
        value = decode_field_value(node)
        item.field_values.append(value)
        field_id = apply_field_value(item, value)
        if field_id and not status_field_id:
            status_field_id = field_id

    content = get_object_field(obj, "content")
    if content:
        apply_content(item, decode_content(content))

    return item, status_field_id


def decode_project_details(data: Dict[str, Any]) -> ProjectInfo:
    """node(id) の ProjectV2 を変換

    アイテムは応答順のまま並べます。items が欠けていてもエラーにはせず、
    アイテムなしのプロジェクトとして返します。

    Raises:
        GitHubDecodeError: node が存在しない場合
    """
    node = get_object_field(data, "node")
    if not node:
        raise GitHubDecodeError("Project node not found")

    project = ProjectInfo(
        project_id=get_string_field(node, "id"),
        title=get_string_field(node, "title"),
        description=get_string_field(node, "shortDescription"),
        url=get_string_field(node, "url"),
    )

    status_field = get_object_field(node, "field")
    if status_field:
        project.column_field_id = get_string_field(status_field, "id")
        project.columns = decode_columns(status_field)

    for item_obj in get_array_field(get_object_field(node, "items"), "nodes"):
        if not isinstance(item_obj, dict):
            continue
        item, status_field_id = decode_project_item(item_obj)
        if status_field_id and not project.column_field_id:
            project.column_field_id = status_field_id
        project.items.append(item)

    return project


def decode_created_project_url(data: Dict[str, Any]) -> str:
    project = get_object_field(get_object_field(data, "createProjectV2"), "projectV2")
    url = get_string_field(project, "url")
    if not url:
        raise GitHubDecodeError("Created project not found in response")
    return url


def decode_created_item_id(data: Dict[str, Any]) -> str:
    item = get_object_field(get_object_field(data, "addProjectV2DraftIssue"), "projectItem")
    return get_string_field(item, "id")

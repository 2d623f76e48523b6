from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union

DRAFT_STATE = "DRAFT"


class RepositoryInfo(BaseModel):
    """GitHubリポジトリ"""

    repository_name: str = ""
    owner: str = ""
    description: str = ""
    created_at: str = ""
    stars: int = 0
    forks: int = 0


class ProjectColumn(BaseModel):
    """Statusフィールドの選択肢（カラム）"""

    option_id: str = ""
    name: str = ""
    color: str = ""


class IssueContent(BaseModel):
    """Issueコンテンツ"""

    kind: Literal["Issue"] = "Issue"
    content_id: str = ""
    title: str = ""
    url: str = ""
    state: str = ""
    created_at: str = ""
    body: str = ""


class PullRequestContent(BaseModel):
    """Pull Requestコンテンツ"""

    kind: Literal["PullRequest"] = "PullRequest"
    content_id: str = ""
    title: str = ""
    url: str = ""
    state: str = ""
    created_at: str = ""
    body: str = ""


class DraftIssueContent(BaseModel):
    """ドラフトIssue（リポジトリを持たない）"""

    kind: Literal["DraftIssue"] = "DraftIssue"
    content_id: str = ""
    title: str = ""
    url: str = ""
    state: str = DRAFT_STATE
    created_at: str = ""
    body: str = ""


class UnknownContent(BaseModel):
    """未対応の __typename"""

    kind: Literal["Unknown"] = "Unknown"
    typename: str = ""


ItemContent = Annotated[
    Union[IssueContent, PullRequestContent, DraftIssueContent, UnknownContent],
    Field(discriminator="kind"),
]


class SingleSelectValue(BaseModel):
    """Single-selectフィールドの値"""

    kind: Literal["single_select"] = "single_select"
    name: str = ""
    option_id: str = ""
    field_id: str = ""
    field_name: str = ""


class DateValue(BaseModel):
    """日付フィールドの値"""

    kind: Literal["date"] = "date"
    date: str = ""
    field_id: str = ""
    field_name: str = ""


class UnknownFieldValue(BaseModel):
    """未対応のフィールド値（クエリで要求していない型は空オブジェクトで返る）"""

    kind: Literal["unknown"] = "unknown"


FieldValue = Annotated[
    Union[SingleSelectValue, DateValue, UnknownFieldValue],
    Field(discriminator="kind"),
]


class ProjectItem(BaseModel):
    """GitHub Projectアイテム"""

    item_id: str = ""
    title: str = ""
    url: str = ""
    type: str = ""  # "Issue", "PullRequest", "DraftIssue"
    state: str = ""
    created_at: str = ""
    body: str = ""
    column_id: str = ""
    column_name: str = ""
    start_date: str = ""
    start_date_field_id: str = ""
    end_date: str = ""
    end_date_field_id: str = ""
    content: Optional[ItemContent] = None
    field_values: List[FieldValue] = []


class ProjectInfo(BaseModel):
    """GitHub Project (v2)"""

    project_id: str = ""
    title: str = ""
    description: str = ""
    url: str = ""
    column_field_id: str = ""
    columns: List[ProjectColumn] = []
    items: List[ProjectItem] = []

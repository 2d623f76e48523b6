from __future__ import annotations

from typing import Any

import pytest

from github_manager.github.client import GitHubDecodeError
from github_manager.github.decoders import (
    decode_field_value,
    decode_project_details,
    decode_project_item,
    decode_repository,
    decode_repository_list,
    decode_user_projects,
)
from github_manager.github.models import (
    DateValue,
    DraftIssueContent,
    IssueContent,
    SingleSelectValue,
    UnknownContent,
    UnknownFieldValue,
)


def status_value(name: str, option_id: str, field_id: str = "F_STATUS") -> dict[str, Any]:
    return {
        "id": f"V_{option_id}",
        "name": name,
        "optionId": option_id,
        "field": {"id": field_id, "name": "Status"},
    }


def date_value(field_name: str, date: str, field_id: str) -> dict[str, Any]:
    return {"id": f"V_{field_id}", "date": date, "field": {"id": field_id, "name": field_name}}


def item_node(
    content: dict[str, Any] | None, field_values: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    return {
        "id": "PVTI_1",
        "fieldValues": {"nodes": field_values or []},
        "content": content,
    }


def test_decode_repository_defaults_missing_fields() -> None:
    repo = decode_repository({"name": "foo", "owner": {"login": "bar"}, "description": None})

    assert repo.repository_name == "foo"
    assert repo.owner == "bar"
    assert repo.description == ""
    assert repo.created_at == ""
    assert repo.stars == 0
    assert repo.forks == 0


def test_decode_repository_reads_counts() -> None:
    repo = decode_repository(
        {
            "name": "foo",
            "owner": {"login": "bar"},
            "description": "demo",
            "created_at": "2024-01-01T00:00:00Z",
            "stargazers_count": 12,
            "forks_count": 3,
        }
    )
    assert (repo.stars, repo.forks, repo.created_at) == (12, 3, "2024-01-01T00:00:00Z")


def test_decode_repository_list_requires_array() -> None:
    with pytest.raises(GitHubDecodeError):
        decode_repository_list({"message": "nope"})


def test_decode_user_projects_requires_nodes() -> None:
    with pytest.raises(GitHubDecodeError):
        decode_user_projects({"viewer": {}})

    projects = decode_user_projects(
        {"viewer": {"projectsV2": {"nodes": [{"id": "PVT_1", "title": "Board", "url": "u"}]}}}
    )
    assert [(p.project_id, p.title, p.url, p.description) for p in projects] == [
        ("PVT_1", "Board", "u", "")
    ]


def test_issue_content_uses_issue_state_alias() -> None:
    item, _ = decode_project_item(
        item_node(
            {
                "__typename": "Issue",
                "id": "I_1",
                "title": "Fix crash",
                "url": "https://github.com/bar/foo/issues/1",
                "issueState": "OPEN",
                "pullRequestState": "MERGED",
                "createdAt": "2024-02-01T10:00:00Z",
                "body": "details",
            }
        )
    )

    assert item.type == "Issue"
    assert item.state == "OPEN"
    assert item.title == "Fix crash"
    assert item.body == "details"
    assert isinstance(item.content, IssueContent)


def test_pull_request_content_uses_pull_request_state_alias() -> None:
    item, _ = decode_project_item(
        item_node(
            {
                "__typename": "PullRequest",
                "title": "Add feature",
                "url": "https://github.com/bar/foo/pull/2",
                "pullRequestState": "MERGED",
            }
        )
    )
    assert item.type == "PullRequest"
    assert item.state == "MERGED"
    assert item.url == "https://github.com/bar/foo/pull/2"


def test_draft_issue_has_draft_state_and_no_url() -> None:
    item, _ = decode_project_item(
        item_node(
            {
                "__typename": "DraftIssue",
                "id": "DI_1",
                "title": "Idea",
                "body": "later",
                "createdAt": "2024-03-01T00:00:00Z",
            }
        )
    )

    assert item.type == "DraftIssue"
    assert item.state == "DRAFT"
    assert item.url == ""
    assert isinstance(item.content, DraftIssueContent)


def test_unknown_content_tag_is_explicit_and_item_keeps_empty_title() -> None:
    item, _ = decode_project_item(item_node({"__typename": "Discussion", "title": "ignored"}))

    assert isinstance(item.content, UnknownContent)
    assert item.content.typename == "Discussion"
    assert item.title == ""
    assert item.item_id == "PVTI_1"


def test_missing_content_leaves_item_untyped() -> None:
    item, _ = decode_project_item(item_node(None))
    assert item.content is None
    assert item.type == ""


def test_start_date_sets_date_and_field_id() -> None:
    item, _ = decode_project_item(
        item_node(None, [date_value("StartDate", "2024-03-01", "F_START")])
    )
    assert item.start_date == "2024-03-01"
    assert item.start_date_field_id == "F_START"
    assert item.end_date == ""


def test_end_date_sets_date_and_field_id() -> None:
    item, _ = decode_project_item(item_node(None, [date_value("EndDate", "2024-03-09", "F_END")]))
    assert (item.end_date, item.end_date_field_id) == ("2024-03-09", "F_END")


def test_unrecognized_date_field_leaves_dates_untouched() -> None:
    item, _ = decode_project_item(item_node(None, [date_value("Deadline", "2024-03-01", "F_X")]))

    assert item.start_date == ""
    assert item.start_date_field_id == ""
    assert item.end_date == ""
    assert item.end_date_field_id == ""
    assert isinstance(item.field_values[0], DateValue)


def test_status_value_sets_column() -> None:
    item, status_field_id = decode_project_item(
        item_node(None, [status_value("In Progress", "OPT_2")])
    )
    assert item.column_name == "In Progress"
    assert item.column_id == "OPT_2"
    assert status_field_id == "F_STATUS"


def test_field_value_union_shapes() -> None:
    assert isinstance(decode_field_value(status_value("Todo", "OPT_1")), SingleSelectValue)
    assert isinstance(decode_field_value(date_value("StartDate", "2024-01-01", "F")), DateValue)
    assert isinstance(decode_field_value({}), UnknownFieldValue)
    assert isinstance(decode_field_value({"name": "Todo"}), UnknownFieldValue)


def test_project_details_keeps_response_order_and_first_status_field_id() -> None:
    data = {
        "node": {
            "id": "PVT_1",
            "title": "Board",
            "url": "https://github.com/users/bar/projects/1",
            "items": {
                "nodes": [
                    item_node(
                        {"__typename": "DraftIssue", "title": "B"},
                        [status_value("Todo", "OPT_1", field_id="F_FIRST")],
                    ),
                    item_node(
                        {"__typename": "DraftIssue", "title": "A"},
                        [status_value("Done", "OPT_3", field_id="F_SECOND")],
                    ),
                ]
            },
        }
    }

    project = decode_project_details(data)

    assert [item.title for item in project.items] == ["B", "A"]
    assert project.column_field_id == "F_FIRST"


def test_project_details_reads_status_field_definition() -> None:
    data = {
        "node": {
            "id": "PVT_1",
            "title": "Board",
            "field": {
                "id": "F_STATUS",
                "name": "Status",
                "options": [
                    {"id": "OPT_1", "name": "Todo", "color": "GRAY"},
                    {"id": "OPT_2", "name": "Done", "color": "GREEN"},
                ],
            },
            "items": {"nodes": []},
        }
    }

    project = decode_project_details(data)

    assert project.column_field_id == "F_STATUS"
    assert [(c.option_id, c.name, c.color) for c in project.columns] == [
        ("OPT_1", "Todo", "GRAY"),
        ("OPT_2", "Done", "GREEN"),
    ]


def test_project_details_without_items_is_still_a_project() -> None:
    project = decode_project_details({"node": {"id": "PVT_1", "title": "Empty"}})
    assert project.title == "Empty"
    assert project.items == []


def test_project_details_requires_node() -> None:
    with pytest.raises(GitHubDecodeError):
        decode_project_details({"node": None})

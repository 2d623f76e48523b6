# Project v2作成
CREATE_PROJECT = """
mutation CreateProject($ownerId: ID!, $title: String!) {
  createProjectV2(input: {
    ownerId: $ownerId
    title: $title
  }) {
    projectV2 {
      id
      title
      url
    }
  }
}
"""

# ドラフトアイテム追加
ADD_DRAFT_ISSUE = """
mutation AddDraftIssue($projectId: ID!, $title: String!) {
  addProjectV2DraftIssue(input: {
    projectId: $projectId
    title: $title
  }) {
    projectItem {
      id
    }
  }
}
"""

# Single-selectフィールド（Status）を更新
UPDATE_ITEM_SINGLE_SELECT = """
mutation UpdateSingleSelect($projectId: ID!, $itemId: ID!, $fieldId: ID!, $optionId: String!) {
  updateProjectV2ItemFieldValue(input: {
    projectId: $projectId
    itemId: $itemId
    fieldId: $fieldId
    value: { singleSelectOptionId: $optionId }
  }) {
    projectV2Item {
      id
    }
  }
}
"""

# 日付フィールドを更新
UPDATE_ITEM_DATE = """
mutation UpdateDate($projectId: ID!, $itemId: ID!, $fieldId: ID!, $date: Date!) {
  updateProjectV2ItemFieldValue(input: {
    projectId: $projectId
    itemId: $itemId
    fieldId: $fieldId
    value: { date: $date }
  }) {
    projectV2Item {
      id
      fieldValues(first: 8) {
        nodes {
          ... on ProjectV2ItemFieldDateValue {
            date
            field {
              ... on ProjectV2Field {
                name
              }
            }
          }
        }
      }
    }
  }
}
"""

# ログインユーザー名の取得
GET_VIEWER_LOGIN = """
query {
  viewer {
    login
  }
}
"""

# ユーザーのProject v2一覧（先頭100件）
GET_USER_PROJECTS = """
query {
  viewer {
    projectsV2(first: 100) {
      nodes {
        id
        title
        shortDescription
        url
      }
    }
  }
}
"""

# オーナー（ユーザー/組織）のノードID取得
GET_OWNER_ID = """
query GetOwnerId($login: String!) {
  repositoryOwner(login: $login) {
    id
  }
}
"""

# Projectの詳細（Statusフィールド定義とアイテム）
GET_PROJECT_DETAILS = """
query GetProjectDetails($projectId: ID!) {
  node(id: $projectId) {
    ... on ProjectV2 {
      id
      title
      shortDescription
      url
      field(name: "Status") {
        ... on ProjectV2SingleSelectField {
          id
          name
          options {
            id
            name
            color
          }
        }
      }
      items(first: 100) {
        nodes {
          id
          fieldValues(first: 8) {
            nodes {
              ... on ProjectV2ItemFieldDateValue {
                id
                date
                field {
                  ... on ProjectV2Field {
                    id
                    name
                  }
                }
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                id
                name
                optionId
                field {
                  ... on ProjectV2SingleSelectField {
                    id
                    name
                  }
                }
              }
            }
          }
          content {
            __typename
            ... on Issue {
              id
              title
              url
              issueState: state
              createdAt
              body
            }
            ... on PullRequest {
              id
              title
              url
              pullRequestState: state
              createdAt
              body
            }
            ... on DraftIssue {
              id
              title
              body
              createdAt
            }
          }
        }
      }
    }
  }
}
"""

# Statusフィールドの選択肢（カラム）取得
GET_PROJECT_COLUMNS = """
query GetProjectColumns($projectId: ID!) {
  node(id: $projectId) {
    ... on ProjectV2 {
      field(name: "Status") {
        ... on ProjectV2SingleSelectField {
          id
          name
          options {
            id
            name
            color
          }
        }
      }
    }
  }
}
"""

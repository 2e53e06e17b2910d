"""REST path templates for Bitbucket Server.

The JSON API accepts ``~user`` wherever a project key is expected (the "user
centric" API); callers pass the owner segment already rendered by
:func:`render_owner`.
"""

from urllib.parse import quote

API_BASE_PATH = "/rest/api/1.0"
API_REPOSITORIES_PATH = API_BASE_PATH + "/projects/{owner}/repos?start={start}"
API_REPOSITORY_PATH = API_BASE_PATH + "/projects/{owner}/repos/{repository}"
API_BRANCHES_PATH = API_REPOSITORY_PATH + "/branches?start={start}"
API_PULL_REQUESTS_PATH = API_REPOSITORY_PATH + "/pull-requests?start={start}"
API_PULL_REQUEST_PATH = API_REPOSITORY_PATH + "/pull-requests/{id}"
API_BROWSE_PATH = API_REPOSITORY_PATH + "/browse/{path}?at={ref}"
API_COMMITS_PATH = API_REPOSITORY_PATH + "/commits/{hash}"
API_PROJECT_PATH = API_BASE_PATH + "/projects/{owner}"
API_COMMIT_COMMENT_PATH = API_REPOSITORY_PATH + "/commits/{hash}/comments"

API_COMMIT_STATUS_PATH = "/rest/build-status/1.0/commits/{hash}"

USER_SIGIL = "~"


def render_owner(owner: str, user_centric: bool) -> str:
    return USER_SIGIL + owner if user_centric else owner


def repositories(owner: str, start: int = 0) -> str:
    return API_REPOSITORIES_PATH.format(owner=owner, start=start)


def repository(owner: str, repository: str) -> str:
    return API_REPOSITORY_PATH.format(owner=owner, repository=repository)


def branches(owner: str, repository: str, start: int = 0) -> str:
    return API_BRANCHES_PATH.format(owner=owner, repository=repository, start=start)


def pull_requests(owner: str, repository: str, start: int = 0) -> str:
    return API_PULL_REQUESTS_PATH.format(owner=owner, repository=repository, start=start)


def pull_request(owner: str, repository: str, pull_request_id: int) -> str:
    return API_PULL_REQUEST_PATH.format(owner=owner, repository=repository, id=pull_request_id)


def browse(owner: str, repository: str, path: str, ref: str) -> str:
    return API_BROWSE_PATH.format(
        owner=owner,
        repository=repository,
        path=quote(path.lstrip("/"), safe="/"),
        ref=quote(ref, safe="/"),
    )


def commit(owner: str, repository: str, commit_hash: str) -> str:
    return API_COMMITS_PATH.format(owner=owner, repository=repository, hash=commit_hash)


def project(owner: str) -> str:
    return API_PROJECT_PATH.format(owner=owner)


def commit_comments(owner: str, repository: str, commit_hash: str) -> str:
    return API_COMMIT_COMMENT_PATH.format(owner=owner, repository=repository, hash=commit_hash)


def build_status(commit_hash: str) -> str:
    return API_COMMIT_STATUS_PATH.format(hash=commit_hash)

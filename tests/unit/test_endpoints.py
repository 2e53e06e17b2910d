from bitbucket_server_client.services import endpoints
from bitbucket_server_client.services.endpoints import render_owner


def test_user_centric_owner_gets_tilde() -> None:
    assert render_owner("alice", user_centric=True) == "~alice"


def test_project_owner_is_unchanged() -> None:
    assert render_owner("TEAM", user_centric=False) == "TEAM"


def test_paged_paths_carry_start_offset() -> None:
    assert endpoints.repositories("~alice", 25) == "/rest/api/1.0/projects/~alice/repos?start=25"
    assert endpoints.branches("proj1", "svc") == "/rest/api/1.0/projects/proj1/repos/svc/branches?start=0"
    assert endpoints.pull_requests("proj1", "svc", 50) == "/rest/api/1.0/projects/proj1/repos/svc/pull-requests?start=50"


def test_single_resource_paths() -> None:
    assert endpoints.repository("proj1", "svc") == "/rest/api/1.0/projects/proj1/repos/svc"
    assert endpoints.pull_request("proj1", "svc", 7) == "/rest/api/1.0/projects/proj1/repos/svc/pull-requests/7"
    assert endpoints.commit("proj1", "svc", "abc") == "/rest/api/1.0/projects/proj1/repos/svc/commits/abc"
    assert endpoints.project("proj1") == "/rest/api/1.0/projects/proj1"
    assert endpoints.commit_comments("~bob", "svc", "abc") == "/rest/api/1.0/projects/~bob/repos/svc/commits/abc/comments"


def test_build_status_path_is_not_repository_scoped() -> None:
    assert endpoints.build_status("abc123") == "/rest/build-status/1.0/commits/abc123"


def test_browse_path_quotes_path_and_ref() -> None:
    path = endpoints.browse("proj1", "svc", "ci/my Jenkinsfile", "refs/heads/feature/x")
    assert path == "/rest/api/1.0/projects/proj1/repos/svc/browse/ci/my%20Jenkinsfile?at=refs/heads/feature/x"

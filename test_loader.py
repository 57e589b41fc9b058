"""
리소스 로더 테스트
"""

from api_client import ApiError
from loader import LoadStatus, Resource


def test_successful_load_stores_data():
    resource = Resource("visitors").load(lambda: [{"id": "1"}], "Failed")

    assert resource.status == LoadStatus.LOADED
    assert resource.data == [{"id": "1"}]
    assert resource.error is None
    assert not resource.is_empty


def test_failed_load_keeps_fixed_message():
    def fetch():
        raise ApiError("socket closed", status_code=502)

    resource = Resource("analytics", data={"stale": True}).load(fetch, "Failed to load analytics data")

    assert resource.is_failed
    assert resource.error == "Failed to load analytics data", "서버 메시지가 그대로 노출됨"
    assert resource.data is None


def test_empty_result_is_distinct_from_failure():
    resource = Resource("visitors").load(lambda: [], "Failed")

    assert resource.is_loaded and resource.is_empty
    assert not resource.is_failed


def test_ensure_loaded_fetches_once():
    calls = []

    def fetch():
        calls.append(1)
        return {"totalUsers": 1}

    resource = Resource("analytics")
    resource.ensure_loaded(fetch, "Failed")
    resource.ensure_loaded(fetch, "Failed")

    assert len(calls) == 1


def test_reload_after_failure_clears_error():
    resource = Resource("booths", status=LoadStatus.FAILED, error="Failed")
    resource.load(lambda: [{"id": "b"}], "Failed")

    assert resource.error is None
    assert resource.is_loaded


def test_reset_returns_to_idle():
    resource = Resource("booths").load(lambda: [1], "Failed")
    resource.reset()

    assert resource.status == LoadStatus.IDLE
    assert resource.data is None
    assert resource.is_idle


def test_reset_after_failure_allows_fetch_again():
    """재시도: 실패 후 reset하면 ensure_loaded가 다시 조회"""
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise ApiError("bad gateway", status_code=502)
        return [1]

    resource = Resource("analytics").ensure_loaded(flaky, "Failed")
    assert resource.is_failed

    resource.ensure_loaded(flaky, "Failed")
    assert len(calls) == 1, "실패 상태에서 자동으로 다시 조회함"

    resource.reset()
    resource.ensure_loaded(flaky, "Failed")
    assert resource.is_loaded
    assert resource.data == [1]

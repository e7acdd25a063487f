import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

# 검색 결과 상태: ok / degraded / rejected
search_counter = Counter("course_search_total", "Total course searches", ["outcome"])

search_latency = Histogram(
    "course_search_latency_seconds",
    "Time spent executing course searches",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

course_deletion_counter = Counter(
    "course_deletions_total", "Course deletion transactions", ["status"]
)


def record_search(outcome: str) -> None:
    search_counter.labels(outcome=outcome).inc()


@contextmanager
def track_search_latency() -> Iterator[None]:
    """검색 실행 시간 측정"""
    start_time = time.time()
    try:
        yield
    finally:
        search_latency.observe(time.time() - start_time)

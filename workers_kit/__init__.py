"""
workers_kit
-----------

Cloudflare Workers 배포 자동화 보조 CLI 패키지.
로컬 환경 점검(init), 배포 태그 생성(tag:create), 환경별 배포 상태 조회(tag:status)
세 가지 명령을 제공한다. 실제 배포는 태그를 감시하는 CI 워크플로우가 담당한다.
"""

__all__ = [
    "config",
    "orchestrator",
    "tagging",
    "status",
]

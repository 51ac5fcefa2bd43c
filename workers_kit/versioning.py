"""
versioning
----------

버전 문자열 비교와 배포 태그 이름(<env>-<version>) 규칙.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple


# 1.2.3 로 시작하면 뒤에 -rc1, +build 등 무엇이 붙어도 허용한다.
SEMVER_PREFIX_RE = re.compile(r"^\d+\.\d+\.\d+")
_NUMERIC_VERSION_RE = re.compile(r"\d+(?:\.\d+)+")
_TAG_RE = re.compile(r"^([^-]+)-(.+)$")


def _segments(version: str) -> list[int]:
    parts: list[int] = []
    for raw in version.strip().split("."):
        try:
            parts.append(int(raw))
        except ValueError:
            parts.append(0)
    return parts


def compare_versions(a: str, b: str) -> int:
    """
    점으로 구분된 숫자 버전을 비교한다. a<b 이면 -1, 같으면 0, a>b 이면 1.
    빠진 뒤쪽 세그먼트는 0 으로 본다 ("1.2" == "1.2.0").
    """
    a_parts = _segments(a)
    b_parts = _segments(b)
    for i in range(max(len(a_parts), len(b_parts))):
        a_part = a_parts[i] if i < len(a_parts) else 0
        b_part = b_parts[i] if i < len(b_parts) else 0
        if a_part > b_part:
            return 1
        if a_part < b_part:
            return -1
    return 0


def extract_version_number(text: str) -> str:
    """
    `git version 2.39.2 (Apple Git-143)`, `v18.19.0` 같은 출력에서 숫자 버전 부분만 꺼낸다.
    """
    match = _NUMERIC_VERSION_RE.search(text)
    if match:
        return match.group(0)
    return re.sub(r"[^0-9.]", "", text)


def is_valid_version(version: str) -> bool:
    return bool(SEMVER_PREFIX_RE.match(version))


def build_tag_name(env: str, version: str) -> str:
    return f"{env.lower()}-{version}"


def parse_tag_name(tag: str) -> Optional[Tuple[str, str]]:
    """
    "prod-2.0.0-rc1" -> ("prod", "2.0.0-rc1"). 형식이 아니면 None.
    """
    match = _TAG_RE.match(tag.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


def tag_message(env: str, version: str) -> str:
    return f"Deploy to {env} - version {version}"

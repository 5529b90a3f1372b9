"""
kzgsrs 설정
============

모든 값은 import 시점에 환경 변수에서 한 번 읽히며 이후 변경되지 않는다.

  KZGSRS_DATA_DIR        애플리케이션 데이터 디렉터리 (기본: OS별 사용자 데이터 디렉터리)
  KZGSRS_TRANSCRIPT_DIR  Aztec ignition 트랜스크립트 위치 (기본: <data dir>/aztec20)
  KZGSRS_BASE_URL        캐시 blob 원격 저장소 (버전 경로 포함)
  KZGSRS_HTTP_TIMEOUT    HTTP 타임아웃 (초)
  KZGSRS_MANIFEST        추가 체크섬 매니페스트 (sha256sum 형식, 선택)
"""

import os
from pathlib import Path

from platformdirs import user_data_dir


APP_NAME = "kzgsrs"

# 곡선 → 세리머니 → 스킴 네임스페이스
CEREMONY_NAMESPACE = "aztec20"

DEFAULT_BASE_URL = "https://github.com/EspressoSystems/ark-srs/releases/download/v0.2.0"
DEFAULT_HTTP_TIMEOUT = 60.0


DATA_DIR = Path(os.environ.get("KZGSRS_DATA_DIR") or user_data_dir(APP_NAME))

TRANSCRIPT_DIR = Path(
    os.environ.get("KZGSRS_TRANSCRIPT_DIR") or DATA_DIR / CEREMONY_NAMESPACE
)

BASE_URL = (os.environ.get("KZGSRS_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")

HTTP_TIMEOUT = float(os.environ.get("KZGSRS_HTTP_TIMEOUT") or DEFAULT_HTTP_TIMEOUT)

_manifest = os.environ.get("KZGSRS_MANIFEST")
MANIFEST_PATH = Path(_manifest) if _manifest else None


def cache_dir():
    """캐시 blob이 저장되는 디렉터리: <data dir>/aztec20"""
    return DATA_DIR / CEREMONY_NAMESPACE

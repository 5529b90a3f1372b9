"""
Aztec ignition KZG10 파라미터: 소비자 API
===========================================

최대 다항식 차수를 받아 KZG10 SRS를 돌려준다.

**폴백 순서** (setup):

  ┌─────────────────────────────────────────────────────┐
  │  1. 로컬 캐시    체크섬 검증 후 잘라서 반환          │
  │  2. 네트워크     blob 다운로드 → 캐시에서 다시 검증  │
  │  3. 트랜스크립트 원본 세리머니 파일 파싱 (느림)      │
  └─────────────────────────────────────────────────────┘

앞 단계가 실패하면 원인을 로그로 남기고 다음 단계로 넘어간다.
마지막 단계의 오류는 그대로 호출자에게 전달된다.
체크섬이 맞지 않는 로컬 파일은 네트워크 단계 전에 이미 삭제된다.

사용 예시:
    >>> from kzgsrs.aztec20.kzg10 import setup
    >>> srs = setup(1024)
    >>> len(srs.powers_of_g)   # 1025
    >>> srs.powers_of_g[0] == G1
"""

import logging

from kzgsrs.aztec20.assembler import assemble
from kzgsrs.aztec20.constants import MAX_DEGREE, SUPPORTED_DEGREES
from kzgsrs.aztec20.transcript import TranscriptReader
from kzgsrs.cache import CacheStore, file_checksum
from kzgsrs.errors import SRSError, OutOfRangeError
from kzgsrs.fetch import Fetcher


__all__ = [
    "MAX_DEGREE",
    "SUPPORTED_DEGREES",
    "setup",
    "setup_from_raw",
    "load_cached",
    "store",
    "download",
]

logger = logging.getLogger(__name__)


def setup(degree, cache=None, fetcher=None, reader=None):
    """차수 degree용 SRS를 캐시 → 네트워크 → 트랜스크립트 순서로 얻는다.

    Args:
        degree: 최대 다항식 차수 (1 ≤ degree ≤ 세리머니 용량)
        cache: CacheStore (기본: 사용자 데이터 디렉터리)
        fetcher: Fetcher (기본: 설정된 원격 저장소)
        reader: TranscriptReader (기본: 설정된 트랜스크립트 디렉터리)

    Returns:
        SRS: degree + 1 개의 G1 점, powers_of_g[0] == G1

    Raises:
        OutOfRangeError: degree가 범위를 벗어날 때
        SRSError: 세 단계가 모두 실패했을 때 마지막 단계의 오류
    """
    reader = reader if reader is not None else TranscriptReader()
    if degree < 1 or degree > reader.capacity:
        raise OutOfRangeError(
            f"degree must be between 1 and {reader.capacity}", degree=degree
        )
    cache = cache if cache is not None else CacheStore()
    fetcher = fetcher if fetcher is not None else Fetcher()

    strategies = [
        ("local cache", lambda: cache.load(degree)),
        ("network", lambda: _fetch_and_load(degree, cache, fetcher)),
        ("transcript", lambda: assemble(degree, reader)),
    ]

    last = len(strategies) - 1
    for i, (name, strategy) in enumerate(strategies):
        try:
            srs = strategy()
        except SRSError as e:
            if i == last:
                raise
            logger.info("SRS from %s unavailable for degree %d: %s", name, degree, e)
            continue
        logger.info("loaded SRS of degree %d from %s", degree, name)
        return srs


def _fetch_and_load(degree, cache, fetcher):
    blob_degree = cache.cached_degree_for(degree)
    dest = fetcher.fetch(blob_degree, cache.default_path(blob_degree))
    return cache.load(degree, dest)


def setup_from_raw(degree, reader=None):
    """캐시를 거치지 않고 원본 트랜스크립트에서 SRS를 조립한다."""
    return assemble(degree, reader)


def load_cached(degree, cache=None):
    """로컬 캐시에서만 SRS를 읽는다 (네트워크/트랜스크립트 폴백 없음)."""
    cache = cache if cache is not None else CacheStore()
    return cache.load(degree)


def store(degree, dest=None, reader=None, cache=None):
    """트랜스크립트에서 degree용 SRS를 만들어 캐시 blob으로 저장한다.

    기본 경로(또는 blob 이름 규칙을 따르는 dest)에 쓰면 digest가 캐시의 로컬
    체크섬 파일에 고정되어 이후 setup/load_cached가 그 blob을 사용한다.
    로그에 남는 SHA-256을 배포 매니페스트에 추가하면 배포용 blob이 된다.

    Returns:
        Path: 기록한 파일 경로
    """
    cache = cache if cache is not None else CacheStore()
    srs = setup_from_raw(degree, reader)
    if dest is None:
        dest = cache.default_path(degree)
    cache.store(srs, dest)
    return dest


def download(degree, dest=None, fetcher=None, cache=None):
    """degree blob을 원격 저장소에서 받아 dest에 기록한다 (검증은 load 시점).

    받은 blob은 로컬에 고정되지 않는다. load하려면 해당 차수의 digest가
    배포 매니페스트나 KZGSRS_MANIFEST 파일에 있어야 한다.

    Returns:
        Path: 기록한 파일 경로
    """
    cache = cache if cache is not None else CacheStore()
    fetcher = fetcher if fetcher is not None else Fetcher()
    if dest is None:
        dest = cache.default_path(degree)
    dest = fetcher.fetch(degree, dest)
    logger.info("sha256 of %s: %s", dest, file_checksum(dest))
    return dest

import hashlib
import os
import sys

import pytest
import requests

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from py_ecc import bn128

from kzgsrs.aztec20.assembler import assemble
from kzgsrs.aztec20.manifest import CacheManifest
from kzgsrs.aztec20.transcript import TranscriptReader
from kzgsrs.cache import CacheStore
from kzgsrs.serialization import serialize_srs


g1 = bn128.G1
g2 = bn128.G2
mult = bn128.multiply


# ── 미니 세리머니 상수 ──
TOXIC_TAU = 3721

NUM_FILES = 3
POINTS_PER_FILE = 4
HEADER_SIZE = 28
CAPACITY = NUM_FILES * POINTS_PER_FILE

# 테스트 매니페스트에 고정되는 캐시 차수
CACHED_DEGREES = (4, 8)


def tau_power(i):
    return pow(TOXIC_TAU, i, bn128.curve_order)


def expected_powers(degree):
    """[G1, τ·G1, ..., τ^degree·G1]"""
    return [mult(g1, tau_power(i)) for i in range(degree + 1)]


# ─────────────────────────────────────────────────────────────────────
# 트랜스크립트 인코딩 (4 limb, limb별 빅엔디언, 하위 limb 먼저)
# ─────────────────────────────────────────────────────────────────────

def encode_field(value):
    value = int(value)
    return b"".join(
        ((value >> (64 * i)) & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big") for i in range(4)
    )


def encode_g1_record(point):
    return encode_field(point[0]) + encode_field(point[1])


def encode_g2_record(point):
    x, y = point
    return (
        encode_field(x.coeffs[0]) + encode_field(x.coeffs[1])
        + encode_field(y.coeffs[0]) + encode_field(y.coeffs[1])
    )


BETA_H = mult(g2, TOXIC_TAU)
SECOND_G2 = mult(g2, 2)


def write_ceremony(directory):
    directory.mkdir(parents=True, exist_ok=True)
    powers = expected_powers(CAPACITY)
    for index in range(NUM_FILES):
        body = b"".join(
            encode_g1_record(powers[index * POINTS_PER_FILE + i + 1])
            for i in range(POINTS_PER_FILE)
        )
        if index == 0:
            body += encode_g2_record(BETA_H) + encode_g2_record(SECOND_G2)
        header = bytes(range(HEADER_SIZE))
        (directory / f"transcript{index:02d}.dat").write_bytes(header + body)
    return directory


# ─────────────────────────────────────────────────────────────────────
# 가짜 HTTP 세션
# ─────────────────────────────────────────────────────────────────────

class FakeResponse:
    def __init__(self, status_code, content):
        self.status_code = status_code
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """url → bytes 테이블로 응답하는 requests.Session 대용."""

    def __init__(self, blobs=None, error=None):
        self.blobs = dict(blobs or {})
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        name = url.rsplit("/", 1)[-1]
        if name not in self.blobs:
            return FakeResponse(404, b"not found")
        return FakeResponse(200, self.blobs[name])


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def ceremony_dir(tmp_path_factory):
    return write_ceremony(tmp_path_factory.mktemp("aztec20"))


@pytest.fixture
def reader(ceremony_dir):
    return TranscriptReader(
        ceremony_dir,
        num_transcripts=NUM_FILES,
        points_per_transcript=POINTS_PER_FILE,
        header_size=HEADER_SIZE,
    )


@pytest.fixture(scope="session")
def blobs(ceremony_dir):
    """{degree: 직렬화된 SRS blob}: 테스트 매니페스트의 차수별"""
    session_reader = TranscriptReader(
        ceremony_dir,
        num_transcripts=NUM_FILES,
        points_per_transcript=POINTS_PER_FILE,
        header_size=HEADER_SIZE,
    )
    return {d: serialize_srs(assemble(d, session_reader)) for d in CACHED_DEGREES}


@pytest.fixture(scope="session")
def manifest(blobs):
    return CacheManifest({d: hashlib.sha256(b).hexdigest() for d, b in blobs.items()})


@pytest.fixture
def cache(tmp_path, manifest):
    return CacheStore(tmp_path / "cache", manifest)


@pytest.fixture
def populated_cache(cache, blobs):
    """모든 테스트 차수의 blob이 들어 있는 캐시"""
    cache.root.mkdir(parents=True, exist_ok=True)
    for degree, blob in blobs.items():
        cache.default_path(degree).write_bytes(blob)
    return cache


@pytest.fixture
def remote_blobs(blobs):
    """원격 저장소 내용: {basename: bytes}"""
    return {f"kzg10-aztec20-srs-{d}.bin": b for d, b in blobs.items()}


@pytest.fixture
def no_transcripts(tmp_path):
    """트랜스크립트가 없는 리더 (원본 파싱 단계가 반드시 실패)"""
    return TranscriptReader(
        tmp_path / "missing",
        num_transcripts=NUM_FILES,
        points_per_transcript=POINTS_PER_FILE,
    )

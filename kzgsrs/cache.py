"""
SRS 로컬 캐시
=============

직렬화된 SRS blob을 애플리케이션 데이터 디렉터리에 저장하고, 체크섬
매니페스트로 검증한 뒤 요청 차수로 잘라 돌려준다.

**경로 규칙**:
  <data dir>/aztec20/kzg10-aztec20-srs-<degree>.bin

**무결성**:
  - 읽은 blob 전체의 SHA-256을 매니페스트 값과 비교한다
  - 불일치하거나 고정된 값이 없으면 파일을 삭제하고 ChecksumMismatchError
    (손상되거나 변조된 캐시는 절대 다시 쓰지 않는다)

**로컬 고정값**:
  store()로 직접 만든 blob의 digest는 <root>/checksums.sha256 에 기록되어
  배포 매니페스트에 없는 차수도 이후 load에서 검증된다.
  배포 매니페스트에 이미 있는 차수는 배포 값이 우선한다.

**쓰기**:
  임시 파일(같은 디렉터리) → fsync → os.replace → 디렉터리 fsync.
  같은 경로를 읽는 쪽은 이전 파일 또는 새 파일 전체만 보게 된다.

사용 예시:
    >>> store = CacheStore()
    >>> srs = store.load(1000)       # 1024 blob을 읽어 1001개로 자름
    >>> len(srs.powers_of_g)         # 1001
"""

import hashlib
import logging
import os
import re
import uuid
from pathlib import Path

from kzgsrs import config
from kzgsrs.aztec20.constants import CEREMONY, basename
from kzgsrs.aztec20.manifest import AZTEC20_MANIFEST, CacheManifest, load_manifest_file
from kzgsrs.errors import (
    SRSIOError, CacheNotFoundError, ChecksumMismatchError, DegreeTooLargeError,
    OutOfRangeError,
)
from kzgsrs.serialization import serialize_srs, deserialize_srs, stored_point_count


logger = logging.getLogger(__name__)

_BLOB_NAME = re.compile(r"^kzg10-" + CEREMONY + r"-srs-(\d+)\.bin$")

_CHUNK = 1 << 20

PINS_NAME = "checksums.sha256"


# ─────────────────────────────────────────────────────────────────────
# 파일 헬퍼
# ─────────────────────────────────────────────────────────────────────

def blob_degree(path):
    """파일 이름에서 blob 차수를 읽는다. 규칙에 맞지 않으면 None."""
    m = _BLOB_NAME.match(Path(path).name)
    return int(m.group(1)) if m else None


def file_checksum(path):
    """파일의 SHA-256 hex digest (청크 단위로 읽음)"""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest()


def temp_path_for(dest):
    """dest와 같은 디렉터리의 고유한 임시 파일 경로"""
    dest = Path(dest)
    return dest.with_name(f".{dest.name}.tmp.{os.getpid()}.{uuid.uuid4().hex[:8]}")


def fsync_dir(dir_path):
    """rename을 디스크에 영속화하기 위해 디렉터리를 fsync 한다.

    rename은 이미 끝난 뒤이므로 실패해도 오류로 올리지 않는다.
    """
    try:
        dir_fd = os.open(dir_path, os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        # O_DIRECTORY 미지원 플랫폼, 디렉터리 fsync 미지원 파일 시스템 (EINVAL)
        logger.debug("directory fsync skipped for %s: %s", dir_path, e)


def write_atomic(dest, chunks):
    """chunks를 임시 파일에 쓰고 dest로 원자적으로 rename 한다.

    Args:
        dest: 최종 경로
        chunks: bytes 이터러블

    Raises:
        SRSIOError: 파일 시스템 오류. 임시 파일은 남기지 않는다.
    """
    dest = Path(dest)
    tmp = temp_path_for(dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "wb") as f:
            for chunk in chunks:
                f.write(chunk)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, dest)
    except OSError as e:
        raise SRSIOError(f"cannot write cache blob: {e}", path=dest) from e
    finally:
        if tmp.exists():
            tmp.unlink()
    fsync_dir(dest.parent)


# ─────────────────────────────────────────────────────────────────────
# CacheStore
# ─────────────────────────────────────────────────────────────────────

class CacheStore:
    """체크섬으로 검증되는 SRS blob 캐시.

    속성:
        root: blob 디렉터리
        manifest: 배포 CacheManifest (차수 → SHA-256)
        pins_path: store()가 기록하는 로컬 체크섬 파일
    """

    def __init__(self, root=None, manifest=None):
        self.root = Path(root) if root is not None else config.cache_dir()
        self.manifest = manifest if manifest is not None else AZTEC20_MANIFEST
        self.pins_path = self.root / PINS_NAME

    def default_path(self, degree):
        return self.root / basename(degree)

    def local_pins(self):
        """store()가 기록한 로컬 고정값. 파일이 없으면 빈 매니페스트.

        Raises:
            SRSIOError: 파일을 읽을 수 없거나 형식이 맞지 않을 때
        """
        if not self.pins_path.exists():
            return CacheManifest({})
        return load_manifest_file(self.pins_path)

    def pinned(self):
        """검증에 쓰는 전체 매니페스트: 배포 값 우선, 로컬 고정값 보충"""
        return self.manifest.combined(self.local_pins())

    def cached_degree_for(self, degree):
        """degree 이상인 고정 차수 중 가장 작은 것.

        Raises:
            DegreeTooLargeError: 그런 차수가 없을 때
        """
        for supported in self.pinned().degrees:
            if supported >= degree:
                return supported
        raise DegreeTooLargeError(
            "no cached SRS blob is large enough", degree=degree
        )

    def load(self, degree, path=None):
        """캐시 blob을 검증하고 degree 로 잘라 SRS를 반환한다.

        Args:
            degree: 요청 차수
            path: blob 경로. 없으면 degree를 덮는 가장 작은 지원 차수의 기본 경로.

        Raises:
            OutOfRangeError: degree < 1
            CacheNotFoundError: 파일이 없을 때
            ChecksumMismatchError: 체크섬 불일치 (파일은 삭제됨)
            DegreeTooLargeError: blob의 점이 degree + 1 개보다 적을 때
            SRSIOError: 파일을 읽을 수 없을 때
        """
        if degree < 1:
            raise OutOfRangeError("degree must be at least 1", degree=degree)
        if path is None:
            path = self.default_path(self.cached_degree_for(degree))
        path = Path(path)

        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise CacheNotFoundError("no cached SRS blob", path=path, degree=degree) from e
        except OSError as e:
            raise SRSIOError(f"cannot read cache blob: {e.strerror}", path=path, degree=degree) from e

        self._verify(path, data)

        stored = stored_point_count(data)
        if stored < degree + 1:
            raise DegreeTooLargeError(
                f"cached blob only holds degree {stored - 1}", path=path, degree=degree
            )
        logger.debug("loaded %s (%d bytes), truncating to degree %d", path, len(data), degree)
        return deserialize_srs(data, max_points=degree + 1)

    def store(self, srs, dest):
        """SRS를 dest에 원자적으로 기록하고 SHA-256 hex digest를 반환한다.

        dest 이름이 blob 규칙을 따르면 digest를 로컬 고정값에 추가한다.
        """
        data = serialize_srs(srs)
        write_atomic(dest, [data])
        digest = hashlib.sha256(data).hexdigest()
        logger.info("stored SRS of degree %d to %s (sha256 %s)", srs.max_degree, dest, digest)

        blob = blob_degree(dest)
        if blob is not None:
            self._pin(blob, digest)
        return digest

    def _pin(self, degree, digest):
        released = self.manifest.expected(degree)
        if released is not None:
            if released != digest:
                logger.warning(
                    "stored blob for degree %d does not match the released checksum %s; "
                    "it will be rejected on load", degree, released
                )
            return

        # 읽기-수정-쓰기: 동시에 store하면 마지막 쓰기만 남는다
        pins = CacheManifest({degree: digest}).combined(self.local_pins())
        write_atomic(self.pins_path, [pins.to_text().encode()])
        logger.debug("pinned degree %d in %s", degree, self.pins_path)

    def _verify(self, path, data):
        blob = blob_degree(path)
        expected = self.pinned().expected(blob) if blob is not None else None
        actual = hashlib.sha256(data).hexdigest()
        if expected is not None and actual == expected:
            return

        if expected is None:
            reason = "no pinned checksum for this blob"
        else:
            reason = f"checksum mismatch: expected {expected}, got {actual}"
        logger.warning("%s; deleting %s", reason, path)
        try:
            path.unlink()
        except FileNotFoundError:
            # 다른 프로세스가 먼저 지움
            pass
        except OSError as e:
            raise SRSIOError(
                f"{reason}, and the file could not be removed: {e.strerror}", path=path
            ) from e
        raise ChecksumMismatchError(reason, path=path, degree=blob)

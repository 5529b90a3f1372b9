"""
캐시 체크섬 매니페스트
======================

지원 차수별 캐시 blob의 SHA-256 값을 고정한 읽기 전용 테이블.
같은 디렉터리의 `checksums.sha256` (sha256sum 형식)과, 설정되어 있으면
KZGSRS_MANIFEST 파일을 import 시점에 한 번 읽어 만들며, 이후 절대 변경되지
않는다. 같은 차수가 양쪽에 있으면 패키지에 포함된 값이 우선한다.

  <64자리 hex>  kzg10-aztec20-srs-<degree>.bin

새 blob을 배포할 때는 `kzgsrs.aztec20.kzg10.store()`가 로그로 남기는 digest를
이 파일(또는 KZGSRS_MANIFEST 파일)에 추가한다.
"""

import re
from importlib import resources
from pathlib import Path
from types import MappingProxyType

from kzgsrs import config
from kzgsrs.aztec20.constants import CEREMONY, basename
from kzgsrs.errors import SRSIOError


_LINE = re.compile(
    r"^(?P<digest>[0-9a-f]{64})\s+\*?kzg10-" + CEREMONY + r"-srs-(?P<degree>\d+)\.bin$"
)


def parse_manifest(text):
    """sha256sum 형식 텍스트 → {degree: hex digest}

    빈 줄과 '#' 주석은 무시한다.

    Raises:
        ValueError: 형식이 맞지 않는 줄이 있거나 차수가 중복될 때
    """
    entries = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        m = _LINE.match(line)
        if m is None:
            raise ValueError(f"malformed checksum manifest line {lineno}: {line!r}")
        degree = int(m.group("degree"))
        if degree in entries:
            raise ValueError(f"duplicate checksum manifest entry for degree {degree}")
        entries[degree] = m.group("digest")
    return entries


class CacheManifest:
    """{차수: SHA-256 hex} 불변 매핑."""

    def __init__(self, entries):
        self._entries = MappingProxyType(
            {int(k): v.lower() for k, v in dict(entries).items()}
        )

    @classmethod
    def from_text(cls, text):
        return cls(parse_manifest(text))

    @property
    def degrees(self):
        """체크섬이 고정된 차수들 (오름차순)"""
        return tuple(sorted(self._entries))

    def expected(self, degree):
        """차수에 대해 고정된 digest. 없으면 None."""
        return self._entries.get(degree)

    def __contains__(self, degree):
        return degree in self._entries

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"CacheManifest(degrees={list(self.degrees)})"

    def combined(self, secondary):
        """self의 항목에 secondary에만 있는 차수를 더한 새 매니페스트.

        같은 차수가 양쪽에 있으면 self의 digest가 남는다.
        """
        entries = dict(secondary._entries)
        entries.update(self._entries)
        return CacheManifest(entries)

    def to_text(self):
        """sha256sum 형식 텍스트 (차수 오름차순)"""
        return "".join(
            f"{self._entries[d]}  {basename(d)}\n" for d in self.degrees
        )


def load_manifest_file(path):
    """sha256sum 형식 파일을 읽어 CacheManifest로 만든다.

    Raises:
        SRSIOError: 파일을 읽을 수 없거나 형식이 맞지 않을 때
    """
    path = Path(path)
    try:
        return CacheManifest.from_text(path.read_text())
    except OSError as e:
        raise SRSIOError(f"cannot read checksum manifest: {e.strerror}", path=path) from e
    except ValueError as e:
        raise SRSIOError(str(e), path=path) from e


def load_default_manifest(extra_path=None):
    """패키지 매니페스트 + (있으면) extra_path 파일. 패키지 값이 우선한다."""
    text = resources.files("kzgsrs.aztec20").joinpath("checksums.sha256").read_text()
    manifest = CacheManifest.from_text(text)
    if extra_path is not None:
        manifest = manifest.combined(load_manifest_file(extra_path))
    return manifest


AZTEC20_MANIFEST = load_default_manifest(config.MANIFEST_PATH)

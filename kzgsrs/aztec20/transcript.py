"""
Aztec ignition 트랜스크립트 리더
================================

번호가 매겨진 트랜스크립트 파일들에서 G1 점을 순서대로, G2 점 2개를 00번
파일에서 읽는다.

**파일 구조** (transcriptNN.dat):

  ┌──────────┬─────────────────────────────┬──────────────────┐
  │ 헤더 28B  │ G1 × 5,040,000 (각 64B)     │ G2 × 2 (각 128B) │
  └──────────┴─────────────────────────────┴──────────────────┘
                                              ↑ 00번 파일에만 존재

**점 위치 계산**:
  i번째 G1 = header + i·64
  j번째 G2 = header + capacity·64 + j·128

각 레코드를 직접 seek 하여 고정폭으로만 읽는다. 수 GB 파일을 통째로
메모리에 올리지 않는다.

**읽기 순서**:
  bound = full·capacity + remainder 일 때
  파일 0..full-1 에서 capacity 개씩, 파일 full 에서 remainder 개를 읽는다.
  반환되는 점들은 τ¹·G1, τ²·G1, ..., τ^bound·G1 (생성자 G1 자체는 포함하지 않음).

사용 예시:
    >>> reader = TranscriptReader("/data/aztec20")
    >>> points = reader.read_g1_points(1024)   # 1024개
    >>> beta_h, _ = reader.read_g2_points()
"""

import logging
from pathlib import Path

from kzgsrs import config
from kzgsrs.aztec20.constants import (
    NUM_TRANSCRIPTS, NUM_G1_PER_TRANSCRIPT, NUM_G2, G1_STARTING_POS, TRANSCRIPT_NAME,
)
from kzgsrs.bn254.points import decode_g1, decode_g2, G1_BYTES, G2_BYTES
from kzgsrs.errors import (
    SRSIOError, OutOfRangeError, MalformedPointError, CurveMembershipError,
)


logger = logging.getLogger(__name__)


class TranscriptReader:
    """세리머니 트랜스크립트 파일 묶음에 대한 seek 기반 리더.

    속성:
        directory: transcriptNN.dat 파일들이 있는 디렉터리
        num_transcripts: 파일 개수
        points_per_transcript: 파일 하나의 G1 점 용량
        header_size: 첫 G1 레코드의 바이트 위치
    """

    def __init__(self, directory=None, num_transcripts=NUM_TRANSCRIPTS,
                 points_per_transcript=NUM_G1_PER_TRANSCRIPT,
                 header_size=G1_STARTING_POS):
        self.directory = Path(directory) if directory is not None else config.TRANSCRIPT_DIR
        self.num_transcripts = num_transcripts
        self.points_per_transcript = points_per_transcript
        self.header_size = header_size

    @property
    def capacity(self):
        """세리머니 전체 G1 점 수"""
        return self.num_transcripts * self.points_per_transcript

    def transcript_path(self, index):
        return self.directory / TRANSCRIPT_NAME.format(index)

    def read_g1_points(self, bound):
        """τ¹·G1 ... τ^bound·G1 을 순서대로 읽는다.

        Raises:
            OutOfRangeError: bound가 음수이거나 세리머니 용량을 넘을 때
            SRSIOError: 필요한 파일이 없거나 잘렸을 때
        """
        if bound < 0 or bound > self.capacity:
            raise OutOfRangeError(
                f"ceremony only supports up to {self.capacity} points", degree=bound
            )

        full_transcripts = bound // self.points_per_transcript
        remainder = bound - full_transcripts * self.points_per_transcript

        points = []
        for index in range(full_transcripts):
            points.extend(
                self.read_g1_points_from_file(self.transcript_path(index), self.points_per_transcript)
            )
        if remainder:
            points.extend(
                self.read_g1_points_from_file(self.transcript_path(full_transcripts), remainder)
            )
        return points

    def read_g1_points_from_file(self, path, num_points):
        """한 트랜스크립트 파일의 앞쪽 num_points 개 G1 점을 읽는다."""
        if num_points > self.points_per_transcript:
            raise OutOfRangeError(
                f"a transcript holds at most {self.points_per_transcript} points, "
                f"requested {num_points}",
                path=path,
            )
        logger.debug("reading %d G1 points from %s", num_points, path)
        points = []
        with self._open(path) as f:
            for i in range(num_points):
                record = self._read_record(f, path, self.header_size + i * G1_BYTES, G1_BYTES)
                points.append(self._decode(decode_g1, record, path))
        return points

    def read_g2_points(self):
        """00번 파일에서 G2 점 2개를 읽는다.

        첫 번째는 τ·G2 (SRS의 beta_h), 두 번째는 세리머니 검증 전용이다.
        """
        path = self.transcript_path(0)
        g2_start = self.header_size + self.points_per_transcript * G1_BYTES
        points = []
        with self._open(path) as f:
            for i in range(NUM_G2):
                record = self._read_record(f, path, g2_start + i * G2_BYTES, G2_BYTES)
                points.append(self._decode(decode_g2, record, path))
        return tuple(points)

    def _open(self, path):
        try:
            return open(path, "rb")
        except OSError as e:
            raise SRSIOError(f"cannot open transcript: {e.strerror}", path=path) from e

    def _read_record(self, f, path, offset, size):
        try:
            f.seek(offset)
            record = f.read(size)
        except OSError as e:
            raise SRSIOError(f"cannot read transcript: {e.strerror}", path=path) from e
        if len(record) != size:
            raise SRSIOError(
                f"transcript truncated: expected {size} bytes at offset {offset}, "
                f"got {len(record)}",
                path=path,
            )
        return record

    def _decode(self, decode, record, path):
        try:
            return decode(record)
        except (MalformedPointError, CurveMembershipError) as e:
            e.path = path
            raise

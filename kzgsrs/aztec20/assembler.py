"""
원본 트랜스크립트로부터 SRS 조립
================================

  powers_of_g = [G1] + [τ¹·G1, ..., τ^d·G1]   (트랜스크립트)
  h           = G2                             (고정 생성자)
  beta_h      = τ·G2                           (트랜스크립트 첫 G2 점)

hiding KZG용 powers_of_gamma_g, neg_powers_of_h 는 Aztec 세리머니에 없으므로
비워 둔다.
"""

import logging

from kzgsrs.aztec20.transcript import TranscriptReader
from kzgsrs.bn254.field import G1, G2
from kzgsrs.errors import OutOfRangeError
from kzgsrs.srs import SRS


logger = logging.getLogger(__name__)


def assemble(degree, reader=None):
    """차수 degree를 지원하는 SRS를 트랜스크립트에서 조립한다.

    Args:
        degree: 최대 다항식 차수 (1 이상, 세리머니 용량 이하)
        reader: TranscriptReader (기본: 설정된 트랜스크립트 디렉터리)

    Returns:
        SRS: degree + 1 개의 G1 점을 가진 SRS

    Raises:
        OutOfRangeError: degree < 1 이거나 세리머니 용량 초과
        SRSIOError, MalformedPointError, CurveMembershipError: 그대로 전파
    """
    if reader is None:
        reader = TranscriptReader()
    if degree < 1 or degree > reader.capacity:
        raise OutOfRangeError(
            f"degree must be between 1 and {reader.capacity}", degree=degree
        )

    logger.info("parsing %d G1 points from transcripts in %s", degree, reader.directory)
    powers_of_g = [G1]
    powers_of_g.extend(reader.read_g1_points(degree))

    beta_h, _ = reader.read_g2_points()

    return SRS(powers_of_g, h=G2, beta_h=beta_h)

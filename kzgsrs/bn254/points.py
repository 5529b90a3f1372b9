"""
트랜스크립트 점 디코더
======================

세리머니 트랜스크립트의 고정폭 바이트 블록을 필드 원소와 검증된 곡선 점으로 변환한다.

**필드 원소 레이아웃 (32 바이트)**:
  64비트 워드 4개. 각 워드는 빅엔디언이고, 워드 순서는 하위 limb부터이다.

      [ limb0 (BE u64) | limb1 (BE u64) | limb2 (BE u64) | limb3 (BE u64) ]
      value = limb0 + limb1·2^64 + limb2·2^128 + limb3·2^192

**점 레이아웃**:
  G1 (64 바이트):  x, y
  G2 (128 바이트): x.c0, x.c1, y.c0, y.c1

외부에서 만들어진 신뢰할 수 없는 입력이므로 모든 실패는 예외로 보고한다.
프로세스를 중단시키는 assert는 사용하지 않는다.
"""

import struct

from kzgsrs.bn254.field import (
    FQ, FQ2, FIELD_MODULUS, FIELD_BYTES,
    is_on_curve_g1, is_on_curve_g2, in_g2_subgroup,
)
from kzgsrs.errors import MalformedPointError, CurveMembershipError


G1_BYTES = 2 * FIELD_BYTES
G2_BYTES = 4 * FIELD_BYTES

_LIMBS = struct.Struct(">4Q")


def decode_field_int(data):
    """32 바이트를 정수로 해석한다. 범위 검사는 하지 않는다."""
    if len(data) != FIELD_BYTES:
        raise MalformedPointError(
            f"field element must be {FIELD_BYTES} bytes, got {len(data)}"
        )
    value = 0
    for i, limb in enumerate(_LIMBS.unpack(data)):
        value |= limb << (64 * i)
    return value


def decode_field(data):
    """32 바이트를 기저체 원소로 디코딩한다.

    Args:
        data: 32 바이트 블록

    Returns:
        FQ: 정규(canonical) 필드 원소

    Raises:
        MalformedPointError: 길이가 틀리거나 값이 p 이상일 때
    """
    value = decode_field_int(data)
    if value >= FIELD_MODULUS:
        raise MalformedPointError("field element is not a canonical residue (>= modulus)")
    return FQ(value)


def decode_g1(data):
    """64 바이트를 G1 점 (x, y)로 디코딩한다.

    Raises:
        MalformedPointError: 길이 또는 필드 디코딩 실패
        CurveMembershipError: (x, y)가 y² = x³ + 3 을 만족하지 않을 때
    """
    if len(data) != G1_BYTES:
        raise MalformedPointError(f"G1 record must be {G1_BYTES} bytes, got {len(data)}")
    x = decode_field(data[:FIELD_BYTES])
    y = decode_field(data[FIELD_BYTES:])
    point = (x, y)
    if not is_on_curve_g1(point):
        raise CurveMembershipError("G1 point is not on the curve")
    return point


def decode_g2(data):
    """128 바이트를 G2 점 (x, y)로 디코딩한다.

    블록 순서: x.c0, x.c1, y.c0, y.c1

    Raises:
        MalformedPointError: 길이 또는 필드 디코딩 실패
        CurveMembershipError: twist 곡선 위에 없거나 위수 r 부분군 밖일 때
    """
    if len(data) != G2_BYTES:
        raise MalformedPointError(f"G2 record must be {G2_BYTES} bytes, got {len(data)}")
    c = [
        int(decode_field(data[i * FIELD_BYTES:(i + 1) * FIELD_BYTES]))
        for i in range(4)
    ]
    point = (FQ2([c[0], c[1]]), FQ2([c[2], c[3]]))
    if not is_on_curve_g2(point):
        raise CurveMembershipError("G2 point is not on the twisted curve")
    if not in_g2_subgroup(point):
        raise CurveMembershipError("G2 point is not in the prime-order subgroup")
    return point

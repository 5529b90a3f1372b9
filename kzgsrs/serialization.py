"""
SRS 캐시 blob 직렬화/역직렬화
==============================

SRS를 캐시 파일에 저장할 수 있는 고정 바이트 형식으로 변환한다.
레이아웃은 arkworks `UniversalParams<Bn254>`의 uncompressed
CanonicalSerialize 배치를 따른다.

  ┌──────────────────────────────────────────────────────────┐
  │ u64 LE  n                                                 │
  │ n × G1  powers_of_g          (x, y: 32 바이트 LE 각각)      │
  │ u64 LE  m, m × (u64 LE key, G1)  powers_of_gamma_g        │
  │ G2      h                    (x.c0, x.c1, y.c0, y.c1)     │
  │ G2      beta_h                                            │
  │ u64 LE  k, k × (u64 LE key, G2)  neg_powers_of_h          │
  └──────────────────────────────────────────────────────────┘

y 좌표 마지막 바이트의 상위 2비트는 플래그이다:
  bit 7 = y가 "음수" (y > -y),  bit 6 = 무한원점.

blob은 체크섬 매니페스트로 검증된 뒤에만 역직렬화되므로 곡선 검사는
생략하고, 필드 범위와 구조만 확인한다.
"""

import struct

from kzgsrs.bn254.field import FQ, FQ2, FIELD_MODULUS, FIELD_BYTES
from kzgsrs.errors import MalformedPointError
from kzgsrs.srs import SRS


G1_SIZE = 2 * FIELD_BYTES
G2_SIZE = 4 * FIELD_BYTES

_U64 = struct.Struct("<Q")

_FLAG_NEGATIVE = 1 << 7
_FLAG_INFINITY = 1 << 6
_FLAG_MASK = _FLAG_NEGATIVE | _FLAG_INFINITY


# ─── 필드 원소 ───

def _encode_fq(value, flags=0):
    data = bytearray(int(value).to_bytes(FIELD_BYTES, "little"))
    data[-1] |= flags
    return bytes(data)


def _decode_fq(data, offset, with_flags=False):
    raw = bytearray(data[offset:offset + FIELD_BYTES])
    if len(raw) != FIELD_BYTES:
        raise MalformedPointError(f"truncated blob at offset {offset}")
    flags = 0
    if with_flags:
        flags = raw[-1] & _FLAG_MASK
        raw[-1] &= ~_FLAG_MASK & 0xFF
    value = int.from_bytes(raw, "little")
    if value >= FIELD_MODULUS:
        raise MalformedPointError(f"non-canonical field element at offset {offset}")
    return value, flags


def _is_negative(coeffs):
    """arkworks 순서(상위 계수부터 비교)로 y > -y 인지 판단한다."""
    for c in reversed(coeffs):
        neg = (-c) % FIELD_MODULUS
        if c != neg:
            return c > neg
    return False


def _point_flags(point, coeffs_of):
    if point is None:
        return _FLAG_INFINITY
    return _FLAG_NEGATIVE if _is_negative(coeffs_of(point[1])) else 0


# ─── G1 point ───

def _g1_coeffs(fq):
    return [int(fq)]


def encode_g1(point):
    """G1 point → 64 bytes (무한원점은 (0, 0) + infinity 플래그)"""
    flags = _point_flags(point, _g1_coeffs)
    if point is None:
        return _encode_fq(0) + _encode_fq(0, flags)
    return _encode_fq(point[0]) + _encode_fq(point[1], flags)


def decode_g1(data, offset):
    """64 bytes → G1 point (py_ecc 튜플, 무한원점은 None)"""
    x, _ = _decode_fq(data, offset)
    y, flags = _decode_fq(data, offset + FIELD_BYTES, with_flags=True)
    if flags & _FLAG_INFINITY:
        return None
    return (FQ(x), FQ(y))


# ─── G2 point ───

def _g2_coeffs(fq2):
    return [int(c) for c in fq2.coeffs]


def encode_g2(point):
    """G2 point → 128 bytes"""
    flags = _point_flags(point, _g2_coeffs)
    if point is None:
        return _encode_fq(0) * 3 + _encode_fq(0, flags)
    x = _g2_coeffs(point[0])
    y = _g2_coeffs(point[1])
    return _encode_fq(x[0]) + _encode_fq(x[1]) + _encode_fq(y[0]) + _encode_fq(y[1], flags)


def decode_g2(data, offset):
    """128 bytes → G2 point"""
    coeffs = [_decode_fq(data, offset + i * FIELD_BYTES)[0] for i in range(3)]
    y_c1, flags = _decode_fq(data, offset + 3 * FIELD_BYTES, with_flags=True)
    if flags & _FLAG_INFINITY:
        return None
    return (FQ2([coeffs[0], coeffs[1]]), FQ2([coeffs[2], y_c1]))


# ─── 길이 접두사 ───

def _decode_u64(data, offset):
    if offset + _U64.size > len(data):
        raise MalformedPointError(f"truncated blob at offset {offset}")
    return _U64.unpack_from(data, offset)[0]


def _encode_map(mapping, encode_point):
    out = [_U64.pack(len(mapping))]
    for key in sorted(mapping):
        out.append(_U64.pack(key))
        out.append(encode_point(mapping[key]))
    return b"".join(out)


def _decode_map(data, offset, decode_point, point_size):
    count = _decode_u64(data, offset)
    offset += _U64.size
    mapping = {}
    for _ in range(count):
        key = _decode_u64(data, offset)
        mapping[key] = decode_point(data, offset + _U64.size)
        offset += _U64.size + point_size
    return mapping, offset


# ─── SRS ───

def serialize_srs(srs):
    """SRS → bytes (정규 인코딩)"""
    parts = [_U64.pack(len(srs.powers_of_g))]
    parts.extend(encode_g1(p) for p in srs.powers_of_g)
    parts.append(_encode_map(srs.powers_of_gamma_g, encode_g1))
    parts.append(encode_g2(srs.h))
    parts.append(encode_g2(srs.beta_h))
    parts.append(_encode_map(srs.neg_powers_of_h, encode_g2))
    return b"".join(parts)


def stored_point_count(data):
    """blob에 저장된 G1 점 개수 (= 저장된 차수 + 1)"""
    return _decode_u64(data, 0)


def deserialize_srs(data, max_points=None):
    """bytes → SRS

    Args:
        data: serialize_srs()가 만든 바이트열
        max_points: 읽을 G1 점의 최대 개수. None이면 전부 읽는다.
                    나머지 점은 디코딩하지 않고 건너뛴다.

    Raises:
        MalformedPointError: 구조가 잘리거나 필드 값이 정규 범위를 벗어날 때
    """
    count = stored_point_count(data)
    g1_start = _U64.size
    g1_end = g1_start + count * G1_SIZE
    if g1_end > len(data):
        raise MalformedPointError(
            f"blob declares {count} G1 points but holds only {len(data)} bytes"
        )

    wanted = count if max_points is None else min(count, max_points)
    powers_of_g = [decode_g1(data, g1_start + i * G1_SIZE) for i in range(wanted)]

    powers_of_gamma_g, offset = _decode_map(data, g1_end, decode_g1, G1_SIZE)
    h = decode_g2(data, offset)
    beta_h = decode_g2(data, offset + G2_SIZE)
    neg_powers_of_h, offset = _decode_map(data, offset + 2 * G2_SIZE, decode_g2, G2_SIZE)

    if offset != len(data):
        raise MalformedPointError(f"{len(data) - offset} trailing bytes after SRS blob")

    return SRS(powers_of_g, h, beta_h, powers_of_gamma_g, neg_powers_of_h)

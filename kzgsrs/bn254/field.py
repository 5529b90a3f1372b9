"""
BN254 기반 모듈: 기저체(Base Field) 및 타원곡선 검사
=====================================================

SRS 점 검증에 필요한 대수적 도구를 py_ecc.bn128에서 가져와 정의한다.
군 연산 자체는 py_ecc가 담당하며, 여기서는 "두 필드 원소로 점을 만든다",
"곡선 방정식을 확인한다", "생성자"라는 최소한의 기능만 노출한다.

**기저체 FQ**:
  bn128 곡선의 좌표가 정의되는 체. 위수 p ≈ 2^254.
  (스칼라 필드 FR과 혼동하지 말 것: SRS 좌표는 모두 FQ 원소이다.)

**확장체 FQ2**:
  FQ[u] / (u² + 1). G2 점의 좌표는 (c0 + c1·u) 형태이다.

**곡선 방정식**:
  G1: y² = x³ + 3            (FQ 위)
  G2: y² = x³ + 3 / (9 + u)  (FQ2 위, twist)

사용 예시:
    >>> from kzgsrs.bn254.field import FQ, G1, is_on_curve_g1
    >>> is_on_curve_g1(G1)   # True
    >>> is_on_curve_g1((FQ(1), FQ(1)))  # False
"""

from py_ecc import bn128


# ─────────────────────────────────────────────────────────────────────
# 체(Field) 상수
# ─────────────────────────────────────────────────────────────────────

FQ = bn128.FQ
FQ2 = bn128.FQ2

# 기저체 위수 p
FIELD_MODULUS = bn128.field_modulus

# 군 위수 r (G2 부분군 검사용)
CURVE_ORDER = bn128.curve_order

# 필드 원소 하나의 직렬화 크기 (바이트)
FIELD_BYTES = 32


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 검사
# ─────────────────────────────────────────────────────────────────────

# G1 그룹 생성자 (1, 2)
G1 = bn128.G1

# G2 그룹 생성자
G2 = bn128.G2


def is_on_curve_g1(point):
    """G1 점이 y² = x³ + 3 을 만족하는지 확인한다.

    Args:
        point: (FQ, FQ) 아핀 좌표

    Returns:
        bool: 곡선 위의 점이면 True (무한원점 None은 False)
    """
    if point is None:
        return False
    return bn128.is_on_curve(point, bn128.b)


def is_on_curve_g2(point):
    """G2 점이 twist 곡선 y² = x³ + 3/(9+u) 를 만족하는지 확인한다."""
    if point is None:
        return False
    return bn128.is_on_curve(point, bn128.b2)


def in_g2_subgroup(point):
    """G2 점이 위수 r 부분군에 속하는지 확인한다.

    BN254의 G2 twist는 cofactor가 1이 아니므로 곡선 방정식만으로는
    충분하지 않다. r·P == O (무한원점) 이어야 한다.
    G1은 cofactor가 1이므로 이 검사가 필요 없다.
    """
    return bn128.multiply(point, CURVE_ORDER) is None

"""
KZG10 Structured Reference String (SRS)
========================================

세리머니에서 유도된 KZG10 범용(universal) 공개 파라미터.

**SRS란?**
  KZG 다항식 커밋먼트 스킴에 필요한 공개 파라미터이다.
  비밀 값 τ ("toxic waste", trapdoor)는 MPC 세리머니에서 만들어지고 폐기되었다.

  SRS = {
      powers_of_g: [G1, τ·G1, τ²·G1, ..., τ^d·G1]
      h, beta_h:   G2, τ·G2
  }

**순서 불변식**:
  powers_of_g의 i번째 원소는 τ^i·G1 이다. 순서를 바꾸면 안 되며,
  잘라내기(truncate)는 항상 앞쪽 접두사만 남긴다.

**변형 전용 필드**:
  powers_of_gamma_g (hiding KZG), neg_powers_of_h 는 Aztec 세리머니에서
  제공되지 않으므로 항상 비어 있다.

사용 예시:
    >>> from kzgsrs.aztec20 import setup
    >>> srs = setup(1024)
    >>> srs.max_degree          # 1024
    >>> len(srs.powers_of_g)    # 1025
"""

from kzgsrs.errors import DegreeTooLargeError, OutOfRangeError


class SRS:
    """KZG10 공개 파라미터. 생성 후 변경하지 않는다.

    속성:
        powers_of_g: [G1, τ·G1, ..., τ^d·G1]
        h: G2 생성자
        beta_h: τ·G2
        powers_of_gamma_g: 항상 빈 dict
        neg_powers_of_h: 항상 빈 dict
    """

    def __init__(self, powers_of_g, h, beta_h, powers_of_gamma_g=None, neg_powers_of_h=None):
        if len(powers_of_g) < 2:
            raise OutOfRangeError(
                f"SRS needs at least 2 G1 powers, got {len(powers_of_g)}"
            )
        self.powers_of_g = list(powers_of_g)
        self.h = h
        self.beta_h = beta_h
        self.powers_of_gamma_g = dict(powers_of_gamma_g or {})
        self.neg_powers_of_h = dict(neg_powers_of_h or {})

    @property
    def max_degree(self):
        """지원하는 최대 다항식 차수 d = len(powers_of_g) - 1"""
        return len(self.powers_of_g) - 1

    @property
    def g2_powers(self):
        """[h, beta_h]: KZG 검증자가 사용하는 G2 쌍"""
        return [self.h, self.beta_h]

    def truncate(self, degree):
        """앞의 degree + 1 개 G1 점만 가진 새 SRS를 반환한다.

        Raises:
            OutOfRangeError: degree < 1
            DegreeTooLargeError: 저장된 점이 degree + 1 개보다 적을 때
        """
        if degree < 1:
            raise OutOfRangeError("degree must be at least 1", degree=degree)
        if degree > self.max_degree:
            raise DegreeTooLargeError(
                f"SRS only supports degree {self.max_degree}", degree=degree
            )
        return SRS(
            self.powers_of_g[:degree + 1],
            self.h,
            self.beta_h,
            self.powers_of_gamma_g,
            self.neg_powers_of_h,
        )

    def __eq__(self, other):
        if not isinstance(other, SRS):
            return NotImplemented
        return (
            self.powers_of_g == other.powers_of_g
            and self.h == other.h
            and self.beta_h == other.beta_h
            and self.powers_of_gamma_g == other.powers_of_gamma_g
            and self.neg_powers_of_h == other.neg_powers_of_h
        )

    def __repr__(self):
        return f"SRS(max_degree={self.max_degree})"

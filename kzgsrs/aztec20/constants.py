"""
Aztec ignition 세리머니 상수
=============================

Aztec의 MPC ignition 세리머니는 BN254 G1 점 1억 8십만 개를 만들었다.
트랜스크립트 형식: https://github.com/AztecProtocol/ignition-verification
("Structure of a transcript file" 문서)

  transcriptNN.dat = [ 헤더 28B | G1 × 5,040,000 | (00번 파일만) G2 × 2 ]
"""

CEREMONY = "aztec20"

NUM_TRANSCRIPTS = 20
NUM_G1_PER_TRANSCRIPT = 5_040_000
NUM_G2 = 2

# 트랜스크립트 파일에서 첫 G1 점의 위치
G1_STARTING_POS = 28

TRANSCRIPT_NAME = "transcript{:02d}.dat"

# 세리머니 전체 용량 = 지원 가능한 최대 차수
MAX_DEGREE = NUM_TRANSCRIPTS * NUM_G1_PER_TRANSCRIPT

# 미리 직렬화된 캐시 blob이 존재하는 차수.
# 2의 거듭제곱보다 조금 크게 잡는다: 마스킹/최적화를 위해 점이 몇 개 더
# 필요한 스킴 변형이 많다.
SUPPORTED_DEGREES = (
    1024,
    16_392,
    32_776,
    65_544,
    131_080,
    262_152,
    524_296,
    1_048_584,
)


def basename(degree):
    """캐시 blob 파일 이름: kzg10-aztec20-srs-<degree>.bin"""
    return f"kzg10-{CEREMONY}-srs-{degree}.bin"

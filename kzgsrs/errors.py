"""
SRS 로딩 오류 분류
==================

SRS를 읽고, 검증하고, 캐시하는 과정에서 발생하는 모든 오류는
SRSError를 상속한다. 각 오류는 진단에 필요한 문맥(경로, 차수)을 함께 가진다.

**복구 정책**:
  - SRSIOError, NetworkError: 호출자가 재시도 여부를 결정한다
  - ChecksumMismatchError, MalformedPointError, CurveMembershipError:
    손상된 입력이므로 재시도하지 않고 독립적인 다른 출처를 사용해야 한다
  - 내부 복구는 setup()의 폴백 체인(로컬 캐시 → 네트워크 → 원본 트랜스크립트)뿐이다
"""


class SRSError(Exception):
    """모든 SRS 오류의 기반 클래스.

    속성:
        path: 관련 파일 경로 (없으면 None)
        degree: 관련 다항식 차수 (없으면 None)
    """

    def __init__(self, message, path=None, degree=None):
        super().__init__(message)
        self.path = path
        self.degree = degree

    def __str__(self):
        msg = super().__str__()
        context = []
        if self.degree is not None:
            context.append(f"degree={self.degree}")
        if self.path is not None:
            context.append(f"path={self.path}")
        if context:
            return f"{msg} ({', '.join(context)})"
        return msg


class SRSIOError(SRSError):
    """파일을 읽거나 쓸 수 없음 (파일 없음, 잘린 파일, 권한 등)."""


class NetworkError(SRSError):
    """원격 저장소 전송 실패 (연결, 타임아웃, HTTP 오류 상태)."""


class MalformedPointError(SRSError):
    """바이트열이 정규(canonical) 필드 원소로 디코딩되지 않음."""


class CurveMembershipError(SRSError):
    """디코딩된 좌표가 곡선 방정식(또는 부분군 조건)을 만족하지 않음."""


class OutOfRangeError(SRSError):
    """요청한 차수가 지원 범위를 벗어남."""


class DegreeTooLargeError(SRSError):
    """캐시된 blob이 요청한 차수보다 적은 점을 가짐."""


class ChecksumMismatchError(SRSError):
    """캐시 파일의 체크섬이 매니페스트와 다름 (손상 또는 변조)."""


class CacheNotFoundError(SRSError):
    """로컬 캐시 파일이 존재하지 않음."""

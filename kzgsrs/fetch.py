"""
원격 캐시 blob 다운로드
========================

  GET <base url>/<kzg10-aztec20-srs-<degree>.bin>

다운로드한 전체 바이트를 목적지와 같은 디렉터리의 임시 파일에 쓴 뒤
os.replace로 한 번에 교체한다. 동시에 여러 호출자가 같은 목적지를 받아도
목적지에는 항상 완전한 파일만 보인다.

재시도는 하지 않는다. 재시도 정책은 호출자가 정한다.
"""

import logging
from pathlib import Path

import requests

from kzgsrs import config
from kzgsrs.aztec20.constants import basename
from kzgsrs.cache import write_atomic
from kzgsrs.errors import NetworkError


logger = logging.getLogger(__name__)


class Fetcher:
    """버전이 고정된 원격 저장소에서 캐시 blob을 받는다.

    속성:
        base_url: 버전 경로까지 포함한 기본 URL
        session: get(url, timeout=) 을 가진 HTTP 클라이언트.
            기본은 requests 모듈 함수로, 닫아야 할 연결 풀을 만들지 않는다.
            연결을 재사용하려면 호출자가 관리하는 requests.Session을 넘긴다.
        timeout: 요청 타임아웃 (초)
    """

    def __init__(self, base_url=None, session=None, timeout=None):
        self.base_url = (base_url or config.BASE_URL).rstrip("/")
        self.session = session if session is not None else requests
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT

    def url_for(self, degree):
        return f"{self.base_url}/{basename(degree)}"

    def fetch(self, degree, dest):
        """degree blob을 내려받아 dest에 원자적으로 기록한다.

        Returns:
            Path: dest

        Raises:
            NetworkError: 연결 실패, 타임아웃, HTTP 오류 상태
            SRSIOError: 임시 파일 쓰기 또는 rename 실패
        """
        dest = Path(dest)
        url = self.url_for(degree)
        logger.info("downloading %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.content
        except requests.RequestException as e:
            raise NetworkError(f"cannot download {url}: {e}", path=dest, degree=degree) from e

        write_atomic(dest, [payload])
        logger.info("saved %d bytes to %s", len(payload), dest)
        return dest

"""
캐시 blob 미러: Flask Blueprint
=================================

Fetcher가 사용하는 원격 인터페이스의 서버 쪽 구현.
로컬 디렉터리의 캐시 blob을 그대로 내려준다.

  GET /<version>/kzg10-aztec20-srs-<degree>.bin  →  200 application/octet-stream
  그 외 (버전 불일치, 이름 규칙 위반, 파일 없음)   →  404

사내 호스트에 blob을 올려 두고 KZGSRS_BASE_URL=http://<host>/<version> 으로
Fetcher를 그쪽으로 향하게 할 수 있다. 무결성 검증은 받는 쪽(CacheStore)이 한다.

blob 디렉터리와 버전은 앱마다 app.config에 들어가므로, 한 프로세스에서
여러 미러 앱을 만들어도 서로 영향을 주지 않는다.

실행 예시:
    >>> app = create_app("/srv/kzgsrs/aztec20", version="v0.2.0")
    >>> app.run(port=8080)
"""

from flask import Flask, Blueprint, abort, current_app, send_from_directory

from kzgsrs import config
from kzgsrs.cache import blob_degree


mirror_bp = Blueprint("mirror", __name__)


def init_mirror_app(app, root, version):
    """blob 디렉터리와 제공할 버전을 앱 설정에 넣는다."""
    app.config["MIRROR_ROOT"] = str(root)
    app.config["MIRROR_VERSION"] = version


@mirror_bp.route("/<version>/<name>")
def get_blob(version, name):
    """캐시 blob 한 개를 내려준다."""
    if version != current_app.config["MIRROR_VERSION"] or blob_degree(name) is None:
        abort(404)
    return send_from_directory(
        current_app.config["MIRROR_ROOT"], name, mimetype="application/octet-stream"
    )


def create_app(root=None, version=None):
    """미러 Flask 앱을 만든다.

    Args:
        root: blob 디렉터리 (기본: 로컬 캐시 디렉터리)
        version: URL 버전 경로 (기본: 설정된 BASE_URL의 마지막 경로)
    """
    if root is None:
        root = config.cache_dir()
    if version is None:
        version = config.BASE_URL.rsplit("/", 1)[-1]

    app = Flask(__name__)
    init_mirror_app(app, root, version)
    app.register_blueprint(mirror_bp)
    return app

"""
Consumer API tests: setup() fallback chain, load_cached, store, download.

The miniature ceremony has capacity 12; cache blobs are pinned for degrees 4 and 8.
"""
import pytest
import requests
from py_ecc import bn128

from kzgsrs import cache as cache_module
from kzgsrs.aztec20 import kzg10
from kzgsrs.aztec20.manifest import CacheManifest, load_default_manifest
from kzgsrs.bn254.field import G1
from kzgsrs.cache import CacheStore, file_checksum
from kzgsrs.errors import (
    OutOfRangeError, CacheNotFoundError, SRSIOError, NetworkError,
)
from kzgsrs.fetch import Fetcher

from conftest import FakeSession, expected_powers, CAPACITY


BASE = "https://example.invalid/srs/v1"


def fetcher_for(blobs):
    session = FakeSession(blobs)
    return Fetcher(BASE, session=session), session


def offline_fetcher():
    session = FakeSession(error=requests.ConnectionError("offline"))
    return Fetcher(BASE, session=session), session


class TestSetup:
    def test_from_local_cache(self, populated_cache, no_transcripts):
        fetcher, session = offline_fetcher()
        srs = kzg10.setup(6, cache=populated_cache, fetcher=fetcher, reader=no_transcripts)
        assert srs.powers_of_g == expected_powers(6)
        assert session.calls == []

    def test_empty_cache_downloads(self, cache, remote_blobs, no_transcripts):
        """빈 캐시 + 네트워크 가능: blob을 받고 매니페스트로 검증한 뒤 반환한다."""
        fetcher, session = fetcher_for(remote_blobs)
        srs = kzg10.setup(4, cache=cache, fetcher=fetcher, reader=no_transcripts)

        assert len(srs.powers_of_g) == 5
        assert session.calls == [f"{BASE}/kzg10-aztec20-srs-4.bin"]
        assert file_checksum(cache.default_path(4)) == cache.manifest.expected(4)

    def test_download_covers_smaller_degree(self, cache, remote_blobs, no_transcripts):
        fetcher, session = fetcher_for(remote_blobs)
        srs = kzg10.setup(7, cache=cache, fetcher=fetcher, reader=no_transcripts)
        assert srs.powers_of_g == expected_powers(7)
        assert session.calls == [f"{BASE}/kzg10-aztec20-srs-8.bin"]

    def test_tampered_cache_falls_back_to_network(self, populated_cache, remote_blobs,
                                                  no_transcripts):
        path = populated_cache.default_path(4)
        data = bytearray(path.read_bytes())
        data[-3] ^= 0xFF
        path.write_bytes(bytes(data))

        fetcher, session = fetcher_for(remote_blobs)
        srs = kzg10.setup(4, cache=populated_cache, fetcher=fetcher, reader=no_transcripts)

        assert srs.powers_of_g == expected_powers(4)
        assert len(session.calls) == 1
        assert path.read_bytes() == remote_blobs["kzg10-aztec20-srs-4.bin"]

    def test_bad_download_falls_back_to_transcript(self, cache, remote_blobs, reader):
        corrupt = dict(remote_blobs)
        corrupt["kzg10-aztec20-srs-4.bin"] = b"garbage"
        fetcher, _ = fetcher_for(corrupt)

        srs = kzg10.setup(3, cache=cache, fetcher=fetcher, reader=reader)
        assert srs.powers_of_g == expected_powers(3)
        assert not cache.default_path(4).exists()

    def test_offline_falls_back_to_transcript(self, cache, reader):
        fetcher, _ = offline_fetcher()
        srs = kzg10.setup(5, cache=cache, fetcher=fetcher, reader=reader)
        assert srs.powers_of_g == expected_powers(5)

    def test_beyond_cached_degrees_parses_transcript(self, populated_cache, reader):
        fetcher, session = offline_fetcher()
        srs = kzg10.setup(10, cache=populated_cache, fetcher=fetcher, reader=reader)
        assert srs.powers_of_g == expected_powers(10)
        assert session.calls == []

    def test_maximum_degree(self, cache, reader):
        fetcher, _ = offline_fetcher()
        srs = kzg10.setup(CAPACITY, cache=cache, fetcher=fetcher, reader=reader)
        assert srs.max_degree == CAPACITY

    @pytest.mark.parametrize("degree", [0, CAPACITY + 1])
    def test_out_of_range(self, cache, reader, degree):
        fetcher, session = offline_fetcher()
        with pytest.raises(OutOfRangeError):
            kzg10.setup(degree, cache=cache, fetcher=fetcher, reader=reader)
        assert session.calls == []

    def test_all_sources_fail(self, cache, no_transcripts):
        fetcher, _ = offline_fetcher()
        with pytest.raises(SRSIOError):
            kzg10.setup(4, cache=cache, fetcher=fetcher, reader=no_transcripts)

    @pytest.mark.parametrize("degree", [1, 4, 8, 11])
    def test_generator_first(self, populated_cache, reader, degree):
        fetcher, _ = offline_fetcher()
        srs = kzg10.setup(degree, cache=populated_cache, fetcher=fetcher, reader=reader)
        assert len(srs.powers_of_g) == degree + 1
        assert srs.powers_of_g[0] == G1

    def test_pairing_consistency(self, populated_cache, reader):
        """e(τ·G1, G2) == e(G1, τ·G2): G1 거듭제곱과 beta_h가 같은 τ에서 나왔다."""
        fetcher, _ = offline_fetcher()
        srs = kzg10.setup(2, cache=populated_cache, fetcher=fetcher, reader=reader)
        lhs = bn128.pairing(srs.h, srs.powers_of_g[1])
        rhs = bn128.pairing(srs.beta_h, srs.powers_of_g[0])
        assert lhs == rhs


class TestLoadCached:
    def test_hit(self, populated_cache):
        assert kzg10.load_cached(3, cache=populated_cache).powers_of_g == expected_powers(3)

    def test_miss_does_not_fall_back(self, cache):
        with pytest.raises(CacheNotFoundError):
            kzg10.load_cached(3, cache=cache)


class TestStoreAndDownload:
    def test_store_default_path(self, cache, reader):
        dest = kzg10.store(8, reader=reader, cache=cache)
        assert dest == cache.default_path(8)
        assert kzg10.load_cached(8, cache=cache).powers_of_g == expected_powers(8)

    def test_store_explicit_dest(self, cache, reader, blobs, tmp_path):
        dest = tmp_path / "out" / "srs.bin"
        assert kzg10.store(4, dest=dest, reader=reader, cache=cache) == dest
        assert dest.read_bytes() == blobs[4]

    def test_download(self, cache, remote_blobs):
        fetcher, _ = fetcher_for(remote_blobs)
        dest = kzg10.download(8, fetcher=fetcher, cache=cache)
        assert dest == cache.default_path(8)
        assert kzg10.load_cached(8, cache=cache).max_degree == 8

    def test_download_failure(self, cache):
        fetcher, _ = offline_fetcher()
        with pytest.raises(NetworkError):
            kzg10.download(8, fetcher=fetcher, cache=cache)
        assert not cache.default_path(8).exists()


class TestDefaultManifest:
    @pytest.fixture
    def default_cache(self, tmp_path, manifest, monkeypatch):
        """KZGSRS_MANIFEST 파일로 차수를 고정한 기본 매니페스트를 쓰는 캐시"""
        extra = tmp_path / "pins.sha256"
        extra.write_text(manifest.to_text())
        monkeypatch.setattr(cache_module, "AZTEC20_MANIFEST", load_default_manifest(extra))
        return CacheStore(tmp_path / "cache")

    def test_download_then_load_cached(self, default_cache, remote_blobs):
        fetcher, _ = fetcher_for(remote_blobs)
        kzg10.download(8, fetcher=fetcher, cache=default_cache)
        assert kzg10.load_cached(8, cache=default_cache).powers_of_g == expected_powers(8)

    def test_setup_downloads(self, default_cache, remote_blobs, no_transcripts):
        fetcher, session = fetcher_for(remote_blobs)
        srs = kzg10.setup(4, cache=default_cache, fetcher=fetcher, reader=no_transcripts)
        assert srs.powers_of_g == expected_powers(4)
        assert session.calls == [f"{BASE}/kzg10-aztec20-srs-4.bin"]

    def test_stored_blob_serves_setup(self, tmp_path, reader, no_transcripts):
        """배포 매니페스트가 비어 있어도 store()한 blob은 다음 setup에서 쓰인다."""
        cache = CacheStore(tmp_path / "cache", CacheManifest({}))
        kzg10.store(8, reader=reader, cache=cache)

        fetcher, session = offline_fetcher()
        srs = kzg10.setup(6, cache=cache, fetcher=fetcher, reader=no_transcripts)
        assert srs.powers_of_g == expected_powers(6)
        assert session.calls == []


class TestConstants:
    def test_supported_degrees(self):
        assert kzg10.SUPPORTED_DEGREES[0] == 1024
        assert kzg10.SUPPORTED_DEGREES[-1] == 1_048_584
        assert list(kzg10.SUPPORTED_DEGREES) == sorted(kzg10.SUPPORTED_DEGREES)

    def test_max_degree(self):
        assert kzg10.MAX_DEGREE == 100_800_000

"""
kzgsrs: 세리머니 기반 KZG10 SRS 로더
=====================================

  kzgsrs.bn254            BN254 필드/곡선 검사, 트랜스크립트 점 디코딩
  kzgsrs.aztec20          Aztec ignition 세리머니 트랜스크립트와 캐시 매니페스트
  kzgsrs.aztec20.kzg10    setup / load_cached / store / download
"""

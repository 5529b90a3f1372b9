"""BN254 곡선: 필드 검사와 점 디코딩."""

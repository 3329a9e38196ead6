"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- prices: 시세 조회
- wallet: 입금/출금 요청
- account: 사용자 정보/설정/내역
- trading: 환전, 거래 정산
- admin: 관리자 제어, 입출금 승인
"""

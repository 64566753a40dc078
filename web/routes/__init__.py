"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- auth: QBO OAuth (authorize URL, 콜백, realm 디버그)
- sync: 동기화 실행
- records: QBO 레코드 조회
- company: 회사 정보
"""

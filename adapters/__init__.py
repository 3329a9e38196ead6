"""
어댑터 레이어

외부 서비스(DB, 시세 API)와의 연동을 담당.
"""

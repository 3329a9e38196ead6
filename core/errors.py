"""
원장 에러 정의

모든 도메인 에러는 LedgerError를 상속하며 HTTP 상태 코드를 함께 가짐.
Web 라우트에서 status_code로 그대로 변환.
"""


class LedgerError(Exception):
    """원장 에러 기본 클래스

    Attributes:
        message: 사용자에게 노출되는 메시지
        status_code: 대응하는 HTTP 상태 코드
    """

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(LedgerError):
    """필수 필드 누락 / 잘못된 형식 / 0 이하 금액

    저장소 접근 전에 발생.
    """

    status_code = 400


class InsufficientFunds(LedgerError):
    """잔고 부족

    잔고 확인 후 발생. 부분 반영 없음.
    """

    status_code = 400

    def __init__(self, currency: str, available: float, requested: float):
        self.currency = currency
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient {currency} balance")


class PriceUnavailable(LedgerError):
    """시세 없음 (환전 중단)"""

    status_code = 400

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Price not available for {currency}")


class BelowMinimum(LedgerError):
    """최소 거래 금액 미만"""

    status_code = 400

    def __init__(self, amount: float, minimum: float):
        self.amount = amount
        self.minimum = minimum
        super().__init__(f"Trade amount must be at least {minimum:g}")


class AlreadyProcessed(LedgerError):
    """이미 처리된 요청 (pending 아님)"""

    status_code = 400


class AccountFrozen(LedgerError):
    """동결 계정"""

    status_code = 403

    def __init__(self, message: str = "Account frozen"):
        super().__init__(message)


class UserNotFound(LedgerError):
    """사용자 없음"""

    status_code = 404

    def __init__(self, username: str):
        self.username = username
        super().__init__("User not found")


class NotFound(LedgerError):
    """레코드 없음"""

    status_code = 404


class StoreFailure(LedgerError):
    """저장소 트랜잭션 실패

    항상 롤백 후 발생하며 일반 서버 에러로 노출.
    """

    status_code = 500

"""领域异常，供需要明确失败状态的调用方使用（核心计算本身不抛出）"""


class DealEngineError(Exception):
    """领域层异常基类"""


class InvalidLoanParametersError(DealEngineError):
    """贷款参数不合法"""


class InvalidLenderProfileError(DealEngineError):
    """贷方利率表不合法"""

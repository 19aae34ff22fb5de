from enum import Enum
from typing import Optional

from pydantic import BaseModel


class EmailDeliveryMode(str, Enum):
    REAL = "real"  # 실제 수신자에게 발송
    SANDBOX = "sandbox"  # 모든 메일을 샌드박스 주소로 우회


class EmailResult(BaseModel):
    success: bool
    message_id: Optional[str] = None
    recipient: Optional[str] = None
    error: Optional[str] = None

"""
Validation module for dashboard form input.

This module contains the pre-call checks for admin forms: agency creation,
workbook uploads and role changes. Validators return a list of messages; an
empty list means the input may be sent to the store.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from constants import ROLES, UPLOAD_ACCEPT

# Get logger instance
logger = logging.getLogger(__name__)


@dataclass
class AgencyForm:
    """
    New agency form input.

    Attributes:
        name (str): Agency display name, must be non-blank.
    """

    name: str = ""

    def __post_init__(self):
        """Normalize the name by stripping whitespace."""
        self.name = (self.name or "").strip()


class AgencyValidator:
    """Validator for the new-agency form."""

    MAX_NAME_LENGTH = 100

    @classmethod
    def validate(cls, form: AgencyForm) -> List[str]:
        errors = []
        if not form.name:
            errors.append("에이전시 이름을 입력하세요")
        elif len(form.name) > cls.MAX_NAME_LENGTH:
            errors.append(
                f"에이전시 이름은 {cls.MAX_NAME_LENGTH}자 이하로 입력하세요"
            )
        return errors


@dataclass
class UploadForm:
    """
    Workbook upload form input.

    Attributes:
        period (str): Operator-entered period label, e.g. "12월1주".
        agency_id (str): Target agency id.
        filename (str): Name of the uploaded file, used for the extension check.
    """

    period: str = ""
    agency_id: str = ""
    filename: Optional[str] = None

    def __post_init__(self):
        self.period = (self.period or "").strip()
        self.agency_id = (self.agency_id or "").strip()


class UploadValidator:
    """Validator for workbook uploads."""

    ALLOWED_EXTENSIONS = tuple(UPLOAD_ACCEPT.split(","))

    @classmethod
    def validate(cls, form: UploadForm) -> List[str]:
        """
        Validate an upload before the workbook is parsed.

        Args:
            form (UploadForm): The upload form input.

        Returns:
            List[str]: Validation error messages. Empty list if validation passes.
        """
        errors = []
        if not form.period:
            errors.append("기간 구분을 입력하세요")
        if not form.agency_id:
            errors.append("에이전시를 선택하세요")
        if not form.filename:
            errors.append("엑셀 파일을 선택하세요")
        elif not form.filename.lower().endswith(cls.ALLOWED_EXTENSIONS):
            errors.append(f"지원하지 않는 파일 형식입니다 ({UPLOAD_ACCEPT})")

        if errors:
            logger.info(f"Upload rejected: {errors}")
        return errors


@dataclass
class RoleChange:
    user_id: str
    role: str


class RoleValidator:
    @classmethod
    def validate(cls, change: RoleChange) -> List[str]:
        if change.role not in ROLES:
            return [f"알 수 없는 역할입니다: {change.role}"]
        return []

"""Bank export templates and header-based layout detection.

Catalog order is detection priority: the first non-generic template whose
synonyms cover at least three of the four required fields is selected, even
if a later template would cover more. ``generic`` is always last and is the
fallback when no specific bank clears that bar.
"""

import logging
from typing import Optional

from bankimport.domain.entities import BankTemplate, ColumnMapping, MAPPING_FIELDS
from bankimport.domain.errors import NotFoundError

logger = logging.getLogger(__name__)

GENERIC_TEMPLATE_ID = "generic"

REQUIRED_FIELDS = ("date", "description", "deposit", "withdrawal")

MIN_TEMPLATE_MATCHES = 3


def _columns(date, description, deposit, withdrawal, balance) -> dict[str, tuple[str, ...]]:
    return {
        "date": tuple(date),
        "description": tuple(description),
        "deposit": tuple(deposit),
        "withdrawal": tuple(withdrawal),
        "balance": tuple(balance),
    }


BANK_TEMPLATES: tuple[BankTemplate, ...] = (
    BankTemplate(
        id="kb",
        name="Kookmin Bank",
        name_ko="국민은행",
        columns=_columns(
            date=["거래일", "거래일자", "날짜", "date", "거래일시"],
            description=["적요", "거래내용", "내용", "비고", "description", "거래적요", "적요내용"],
            deposit=["입금", "입금액", "입금(원)", "deposit", "입금금액", "받은금액"],
            withdrawal=["출금", "출금액", "출금(원)", "withdrawal", "출금금액", "보낸금액"],
            balance=["잔액", "잔액(원)", "balance", "거래후잔액", "거래 후 잔액"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD", "YYYYMMDD"),
    ),
    BankTemplate(
        id="shinhan",
        name="Shinhan Bank",
        name_ko="신한은행",
        columns=_columns(
            date=["거래일", "거래일자", "날짜", "거래일시", "일자"],
            description=["거래내용", "적요", "내용", "거래적요", "적요내용", "거래명"],
            deposit=["입금액", "입금", "입금(원)", "받은금액"],
            withdrawal=["출금액", "출금", "출금(원)", "보낸금액"],
            balance=["잔액", "거래후잔액", "잔액(원)"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD"),
    ),
    BankTemplate(
        id="woori",
        name="Woori Bank",
        name_ko="우리은행",
        columns=_columns(
            date=["거래일자", "거래일", "날짜", "거래일시"],
            description=["적요", "거래내용", "내용", "거래적요"],
            deposit=["입금액", "입금", "받으신금액", "입금(원)"],
            withdrawal=["출금액", "출금", "찾으신금액", "출금(원)"],
            balance=["잔액", "거래후잔액", "현재잔액"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD"),
    ),
    BankTemplate(
        id="nh",
        name="NH Bank",
        name_ko="농협은행",
        columns=_columns(
            date=["거래일자", "거래일", "날짜", "일자"],
            description=["적요", "거래내용", "비고", "내역"],
            deposit=["입금액", "입금", "입금(원)"],
            withdrawal=["출금액", "출금", "출금(원)"],
            balance=["잔액", "거래후잔액", "잔액(원)"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD", "YYYYMMDD"),
    ),
    BankTemplate(
        id="hana",
        name="Hana Bank",
        name_ko="하나은행",
        columns=_columns(
            date=["거래일", "거래일자", "날짜", "거래일시"],
            description=["적요", "거래내용", "내용", "기재내용"],
            deposit=["입금", "입금액", "받은금액"],
            withdrawal=["출금", "출금액", "보낸금액"],
            balance=["잔액", "거래후잔액"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD"),
    ),
    BankTemplate(
        id="ibk",
        name="IBK",
        name_ko="기업은행",
        columns=_columns(
            date=["거래일자", "거래일", "날짜"],
            description=["적요", "거래내용", "내용", "기재내용"],
            deposit=["입금액", "입금", "입금(원)"],
            withdrawal=["출금액", "출금", "출금(원)"],
            balance=["잔액", "거래후잔액", "잔액(원)"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD"),
    ),
    BankTemplate(
        id="sc",
        name="SC Bank",
        name_ko="SC제일은행",
        columns=_columns(
            date=["거래일", "거래일자", "Date", "날짜"],
            description=["적요", "거래내용", "Description", "내용"],
            deposit=["입금", "입금액", "Credit", "입금(원)"],
            withdrawal=["출금", "출금액", "Debit", "출금(원)"],
            balance=["잔액", "Balance", "거래후잔액"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD", "DD/MM/YYYY"),
    ),
    BankTemplate(
        id="kakao",
        name="Kakao Bank",
        name_ko="카카오뱅크",
        columns=_columns(
            date=["거래일시", "거래일", "날짜", "일시"],
            description=["거래내용", "적요", "내용", "메모"],
            deposit=["입금액", "입금", "받은금액"],
            withdrawal=["출금액", "출금", "보낸금액"],
            balance=["잔액", "거래후잔액"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD HH:mm:ss"),
    ),
    BankTemplate(
        id="toss",
        name="Toss Bank",
        name_ko="토스뱅크",
        columns=_columns(
            date=["거래일시", "거래일", "날짜"],
            description=["거래내용", "적요", "내용"],
            deposit=["입금액", "입금"],
            withdrawal=["출금액", "출금"],
            balance=["잔액"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD"),
    ),
    BankTemplate(
        id=GENERIC_TEMPLATE_ID,
        name="Generic",
        name_ko="일반 템플릿",
        columns=_columns(
            date=["거래일", "거래일자", "날짜", "date", "일자", "일시", "거래일시"],
            description=[
                "적요", "거래내용", "내용", "description", "비고",
                "거래적요", "내역", "기재내용", "메모",
            ],
            deposit=["입금", "입금액", "deposit", "입금(원)", "받은금액", "입금금액", "credit"],
            withdrawal=["출금", "출금액", "withdrawal", "출금(원)", "보낸금액", "출금금액", "debit"],
            balance=["잔액", "balance", "거래후잔액", "잔액(원)", "현재잔액"],
        ),
        date_formats=("YYYY-MM-DD", "YYYY.MM.DD", "YYYY/MM/DD", "YYYYMMDD", "DD/MM/YYYY"),
    ),
)


def normalize_header(header: Optional[str]) -> str:
    """Lower-case and trim a header cell for synonym comparison."""
    return (header or "").strip().lower()


def get_template(template_id: str) -> BankTemplate:
    """Get a template by ID.

    Raises:
        NotFoundError: If no template has the given ID
    """
    for template in BANK_TEMPLATES:
        if template.id == template_id:
            return template
    raise NotFoundError(f"Bank template '{template_id}' not found")


def get_generic_template() -> BankTemplate:
    return get_template(GENERIC_TEMPLATE_ID)


def list_templates(include_generic: bool = False) -> list[BankTemplate]:
    """List templates in catalog (priority) order."""
    return [t for t in BANK_TEMPLATES if include_generic or t.id != GENERIC_TEMPLATE_ID]


def _synonyms(template: BankTemplate, field_name: str) -> set[str]:
    return {name.lower() for name in template.columns[field_name]}


def count_required_matches(headers: list[str], template: BankTemplate) -> int:
    """Count required fields with at least one synonym among the headers."""
    normalized = {normalize_header(h) for h in headers}
    return sum(
        1 for field_name in REQUIRED_FIELDS if normalized & _synonyms(template, field_name)
    )


def find_bank_template(headers: list[str]) -> BankTemplate:
    """Select the first catalog template matching the header row.

    Args:
        headers: Header row cells as read from the file

    Returns:
        Matching bank template, or the generic template if none matches
    """
    for template in BANK_TEMPLATES:
        if template.id == GENERIC_TEMPLATE_ID:
            continue
        if count_required_matches(headers, template) >= MIN_TEMPLATE_MATCHES:
            logger.debug("Headers matched bank template '%s'", template.id)
            return template

    logger.debug("No bank template matched; using generic template")
    return get_generic_template()


def detect_column_mapping(headers: list[str], template: BankTemplate) -> ColumnMapping:
    """Map each canonical field to the first header matching one of its synonyms.

    Args:
        headers: Header row cells in file order
        template: Template whose synonyms are used

    Returns:
        Column mapping; fields without a matching header are None
    """
    normalized = [normalize_header(h) for h in headers]
    resolved = {}
    for field_name in MAPPING_FIELDS:
        synonyms = _synonyms(template, field_name)
        resolved[field_name] = next(
            (headers[i] for i, h in enumerate(normalized) if h in synonyms), None
        )
    return ColumnMapping(**resolved)

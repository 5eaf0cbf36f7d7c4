"""Keyword rules mapping transaction descriptions to chart-of-accounts entries.

Entries are tried in list order and the first one with a matching keyword
wins, so a short keyword listed early shadows a more specific one listed
later: "구독" (522) claims every "구독료" description before 561 is tried.
"""

from dataclasses import dataclass

from bankimport.domain.entities import TransactionType


@dataclass(frozen=True)
class ClassificationPattern:
    """Keyword rule suggesting an account for one transaction direction."""

    keywords: tuple[str, ...]
    transaction_type: TransactionType
    account_code: str
    account_name: str


def _income(keywords, code, name) -> ClassificationPattern:
    return ClassificationPattern(tuple(keywords), TransactionType.INCOME, code, name)


def _expense(keywords, code, name) -> ClassificationPattern:
    return ClassificationPattern(tuple(keywords), TransactionType.EXPENSE, code, name)


CLASSIFICATION_PATTERNS: tuple[ClassificationPattern, ...] = (
    # Income
    _income(["급여", "월급", "상여", "보너스", "임금"], "401", "급여수입"),
    _income(["정부보조금", "보조금", "지원금", "교부금"], "402", "보조금수입"),
    _income(["기부", "후원", "찬조", "기증"], "403", "기부금수입"),
    _income(["회비", "회원비", "멤버십"], "404", "회비수입"),
    _income(["이자", "예금이자", "적금이자"], "405", "이자수입"),
    _income(["용역", "수임료", "수수료수입", "대행수수료"], "406", "용역수입"),
    _income(["매출", "판매", "상품매출"], "407", "매출수입"),
    _income(["임대", "임대료수입", "렌트"], "408", "임대수입"),
    # Personnel
    _expense(["인건비", "급여지출", "상여지출"], "501", "급여"),
    _expense(["퇴직금", "퇴직급여"], "502", "퇴직급여"),
    _expense(["4대보험", "건강보험", "국민연금", "고용보험", "산재보험"], "503", "복리후생비"),
    # Office
    _expense(["임대료", "월세", "관리비", "건물관리"], "511", "임차료"),
    _expense(["전기", "전기료", "전기요금", "한전"], "512", "수도광열비"),
    _expense(["수도", "수도료", "수도요금", "가스", "가스요금", "도시가스"], "512", "수도광열비"),
    _expense(["통신비", "전화요금", "인터넷", "KT", "SKT", "LGU+", "통신료"], "513", "통신비"),
    # Operations
    _expense(["소모품", "사무용품", "복사용지", "프린터", "잉크", "토너"], "521", "소모품비"),
    _expense(["도서", "서적", "신문", "잡지", "구독"], "522", "도서인쇄비"),
    _expense(["인쇄", "제본", "복사"], "522", "도서인쇄비"),
    _expense(["교육", "연수", "워크숍", "세미나", "강습"], "523", "교육훈련비"),
    _expense(["회의비", "다과", "회의", "티타임"], "524", "회의비"),
    _expense(["식대", "점심", "저녁", "식비", "음식", "배달", "도시락"], "525", "복리후생비"),
    # Transport
    _expense(["교통비", "버스", "지하철", "택시", "주차", "톨비", "고속도로"], "531", "여비교통비"),
    _expense(["출장", "여비", "숙박", "호텔"], "531", "여비교통비"),
    _expense(["주유", "유류", "휘발유", "경유", "SK에너지", "GS칼텍스"], "532", "차량유지비"),
    # Services
    _expense(["수수료", "이체수수료", "송금수수료", "카드수수료"], "541", "지급수수료"),
    _expense(["광고", "홍보", "마케팅", "페이스북", "구글광고", "네이버광고"], "542", "광고선전비"),
    _expense(["보험", "보험료", "화재보험", "배상책임"], "543", "보험료"),
    _expense(["세금", "부가세", "원천세", "지방세", "재산세"], "544", "세금과공과"),
    # Events
    _expense(["행사", "이벤트", "행사비", "대관료"], "551", "행사비"),
    _expense(["기념품", "선물", "답례품"], "552", "접대비"),
    _expense(["경조사", "조의금", "축의금", "화환"], "553", "경조사비"),
    # IT and equipment
    _expense(["소프트웨어", "SW", "라이센스", "구독료", "SaaS"], "561", "소프트웨어비"),
    _expense(["서버", "호스팅", "클라우드", "AWS", "Azure", "GCP"], "562", "서버운영비"),
    _expense(["장비", "기자재", "컴퓨터", "노트북", "모니터"], "563", "비품구입비"),
    # Professional
    _expense(["세무", "회계", "자문", "컨설팅", "법률"], "571", "지급수수료"),
    _expense(["용역비", "외주", "프리랜서"], "572", "외주용역비"),
)


def patterns_for(txn_type: TransactionType) -> list[ClassificationPattern]:
    """Return the patterns for one direction, in priority order."""
    return [p for p in CLASSIFICATION_PATTERNS if p.transaction_type == txn_type]

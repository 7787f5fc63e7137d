"""
金额/日期格式化 - 印度记数法

- format_inr: ₹1,23,456（不保留小数）
- format_date_in: 日/月/年
- number_to_words: 大写金额（crore/lakh/thousand，卢比+派士）
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

ONES = ["", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine"]
TEENS = [
    "ten", "eleven", "twelve", "thirteen", "fourteen",
    "fifteen", "sixteen", "seventeen", "eighteen", "nineteen",
]
TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]


def _group_indian(digits: str) -> str:
    """末三位一组，其余两位一组"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(value: float | Decimal | int) -> str:
    amount = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}₹{_group_indian(str(abs(int(amount))))}"


def format_date_in(value: date | datetime | str | None) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value.day}/{value.month}/{value.year}"


def _hundreds(num: int) -> str:
    result = ""
    if num >= 100:
        result += ONES[num // 100] + " hundred "
        num %= 100
    if num >= 20:
        result += TENS[num // 10] + " "
        num %= 10
    elif num >= 10:
        return result + TEENS[num - 10] + " "
    if num > 0:
        result += ONES[num] + " "
    return result


def _indian_words(num: int) -> str:
    """整数读法；crore 以上的倍数递归展开"""
    result = ""
    if num >= 10_000_000:
        result += _indian_words(num // 10_000_000) + "crore "
        num %= 10_000_000
    if num >= 100_000:
        result += _hundreds(num // 100_000) + "lakh "
        num %= 100_000
    if num >= 1000:
        result += _hundreds(num // 1000) + "thousand "
        num %= 1000
    if num:
        result += _hundreds(num)
    return result


def number_to_words(amount: float | Decimal | int) -> str:
    """金额大写，如 1234.5 -> One thousand two hundred thirty four rupees and fifty paise only."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if value == 0:
        return "Zero"

    rupees = int(value)
    paise = int((value - rupees) * 100)

    result = _indian_words(rupees).strip()
    if result:
        result = result[:1].upper() + result[1:] + " rupees"

    if paise > 0:
        if result:
            result += " and "
        result += _hundreds(paise).strip() + " paise"

    return result + " only."

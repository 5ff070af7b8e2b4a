from typing import Dict, Iterable, List, Mapping, Union

from schemas.lookup import LookupRecord

# 无法确定滥用联系人的地址统一归入此键
UNRESOLVED_KEY = "unknown@unknown"


def contact_key(record: LookupRecord) -> str:
    """记录的分组键: 非空滥用邮箱，否则为 UNRESOLVED_KEY"""
    email = (record.abuse_email or "").strip()
    return email or UNRESOLVED_KEY


def group_by_abuse_email(
    records: Union[Mapping[str, LookupRecord], Iterable[LookupRecord]]
) -> Dict[str, List[LookupRecord]]:
    """按滥用邮箱分组

    功能: 每条记录恰好进入一个分组，组内顺序与输入顺序一致
    参数: records: 查询记录序列，或 IP -> 记录 的映射
    返回: 联系人 -> 记录列表
    """
    if isinstance(records, Mapping):
        records = records.values()

    groups: Dict[str, List[LookupRecord]] = {}
    for record in records:
        groups.setdefault(contact_key(record), []).append(record)
    return groups

from typing import Callable, Dict, List, Optional, Tuple, Union

from log2abuse.lookup import DirectorySource

# ARIN 风格输出: Organization 出现在 OrgName 之前，用于验证优先级
ARIN_WHOIS = """
#
# ARIN WHOIS data and services are subject to the Terms of Use
#

NetRange:       203.0.113.0 - 203.0.113.255
CIDR:           203.0.113.0/24
NetName:        EXAMPLE-NET
Organization:   Example Hosting (EXH-1)
OrgName:        Example Hosting LLC
Country:        US

OrgAbuseHandle: ABUSE123-ARIN
OrgAbuseName:   Abuse Desk
OrgAbuseEmail:  Abuse@Example-Hosting.com
"""

# RIPE 风格输出
RIPE_WHOIS = """% This is the RIPE Database query service.
% Abuse contact for '198.51.100.0 - 198.51.100.255' is 'abuse@ripe-example.net'

inetnum:        198.51.100.0 - 198.51.100.255
netname:        RIPE-EXAMPLE
descr:          Example Transit GmbH
country:        de
abuse-mailbox:  noc@ripe-example.net
"""

# 没有任何滥用邮箱的输出
NO_CONTACT_WHOIS = """
inetnum:        192.0.2.0 - 192.0.2.255
netname:        DOC-NET
country:        NL
"""


class FakeClock:
    """可控的单调时钟，sleep 直接推进时间"""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeSource(DirectorySource):
    """记录调用时间的假查询源"""

    def __init__(
        self,
        responses: Dict[str, Union[str, Exception]],
        clock: Optional[Callable[[], float]] = None,
        duration: float = 0.0
    ):
        super().__init__("fake")
        self.responses = responses
        self.clock = clock
        self.duration = duration
        self.calls: List[Tuple[str, Optional[float]]] = []

    async def query(self, ip: str) -> str:
        self.calls.append((ip, self.clock() if self.clock else None))
        if self.clock is not None and self.duration:
            self.clock.now += self.duration
        value = self.responses.get(ip, "")
        if isinstance(value, Exception):
            raise value
        return value


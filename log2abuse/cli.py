#!/usr/bin/env python3
"""
log2abuse 命令行入口

从标准输入读取日志流，提取公网 IP，查询滥用联系人并生成滥用报告。

用法:
    cat /var/log/auth.log | log2abuse
    tail -n 1000 /var/log/nginx/access.log | log2abuse --sender-email admin@example.com
"""
import argparse
import asyncio
import sys
from typing import List, Optional, TextIO

from log2abuse.config import config
from log2abuse.logging_config import setup_logging, get_logger
from log2abuse.lookup import AbuseLookupEngine, RateLimiter, WhoisSource
from log2abuse.pipeline import generate_abuse_reports
from utils.formatting import build_json_output, format_text_output
from utils.report_files import save_reports_to_files
from utils.whois_info import verify_whois

logger = get_logger(__name__)

EPILOG = """
示例:
  # 处理认证日志
  cat /var/log/auth.log | log2abuse --sender-email admin@mycompany.com

  # 自定义发件人
  grep "attack" /var/log/nginx/access.log | log2abuse \\
    --sender-email security@mycompany.com \\
    --sender-name "Security Team" \\
    --sender-org "MyCompany Security"

  # 以 JSON 输出供后续处理
  cat logs.txt | log2abuse --json > reports.json
"""


def build_parser() -> argparse.ArgumentParser:
    """构建命令行参数解析器，默认值取自配置"""
    parser = argparse.ArgumentParser(
        prog="log2abuse",
        description="从日志生成滥用报告 (Log to Abuse Reports)",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--sender-email", default=config.sender_email, help="发件人邮箱")
    parser.add_argument("--sender-name", default=config.sender_name, help="发件人显示名")
    parser.add_argument("--sender-org", default=config.sender_org, help="落款组织")
    parser.add_argument("--max-logs", type=int, default=config.max_logs_per_ip, help="每个 IP 附带的最大日志行数")
    parser.add_argument("--threshold", type=int, default=config.threshold, help="IP 被纳入报告的最小出现次数")
    parser.add_argument("--json", action="store_true", default=config.json_output, help="以 JSON 格式输出")
    parser.add_argument("--output-dir", default=config.output_dir, help="报告文件保存目录")
    parser.add_argument("--whois-path", default=config.whois_path, help="whois 可执行文件路径")
    parser.add_argument("--log-level", default="INFO", help="日志级别 (DEBUG/INFO/WARNING/ERROR)")
    return parser


def read_lines(stream: TextIO) -> List[str]:
    """读取全部输入行；交互式终端视为无输入

    优先读取底层字节流，非 UTF-8 字节替换为 U+FFFD，不中断运行。
    """
    if stream.isatty():
        return []
    raw = getattr(stream, "buffer", None)
    if raw is None:
        return [line.rstrip("\r\n") for line in stream]
    return [line.decode("utf-8", errors="replace").rstrip("\r\n") for line in raw]


def print_progress(ip: str, current: int, total: int) -> None:
    """在 stderr 上刷新查询进度"""
    sys.stderr.write(f"\r  [{current}/{total}] {ip}")
    sys.stderr.flush()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, use_colors=sys.stderr.isatty())

    if args.max_logs < 0:
        logger.warning(f"--max-logs 不能为负数，使用默认值 {config.max_logs_per_ip}")
        args.max_logs = config.max_logs_per_ip

    logger.info("正在从标准输入读取日志...")
    lines = read_lines(sys.stdin)
    if not lines:
        logger.error("未读取到输入，请通过管道传入日志数据")
        logger.error("示例: cat /var/log/auth.log | log2abuse")
        return 1
    logger.info(f"读取 {len(lines)} 行日志")

    if not verify_whois(args.whois_path):
        logger.warning("whois 不可用，所有地址都将归入未解析列表")

    options = config.report_options(
        sender_email=args.sender_email,
        sender_name=args.sender_name,
        sender_org=args.sender_org,
        max_logs_per_ip=args.max_logs
    )
    engine = AbuseLookupEngine(
        source=WhoisSource(whois_path=args.whois_path, timeout=config.whois_timeout),
        limiter=RateLimiter(min_interval=config.whois_min_interval)
    )

    logger.info("正在查询滥用联系人（可能需要一段时间）...")
    result = asyncio.run(generate_abuse_reports(
        lines,
        options=options,
        threshold=args.threshold,
        engine=engine,
        on_progress=print_progress
    ))
    if result.stats.unique_ips:
        sys.stderr.write("\n")

    if result.status != "success":
        logger.warning(result.message)
        return 0

    logger.info(f"正在保存报告到 {args.output_dir}/ ...")
    saved = save_reports_to_files(result.reports, args.output_dir)
    logger.info(f"已保存 {saved.total} 份报告到 {len(saved.providers)} 个服务商目录")

    if args.json:
        print(build_json_output(result, saved, args.output_dir))
    else:
        print(format_text_output(result, saved, args.output_dir))

    logger.info("完成")
    return 0


if __name__ == "__main__":
    sys.exit(main())

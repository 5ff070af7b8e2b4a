"""
log2abuse 配置模块

包含发件人信息、whois 查询参数、输出目录与 MCP 服务器配置。
支持从环境变量加载配置。
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional, Union
import yaml
from pydantic import BaseModel, Field, ValidationError

from schemas.report import ReportOptions

logger = logging.getLogger(__name__)


class ReporterConfig(BaseModel):
    """
    报告配置模型
    """
    sender_email: str = Field(default="abuse@example.com", description="发件人邮箱")
    sender_name: str = Field(default="Abuse Reporter", description="发件人显示名")
    sender_org: str = Field(default="System Administrator", description="落款组织")
    max_logs_per_ip: int = Field(default=50, ge=0, description="每个 IP 附带的最大日志行数")
    threshold: int = Field(default=2, ge=1, description="IP 最小出现次数")


class WhoisConfig(BaseModel):
    """
    whois 查询配置模型
    """
    whois_path: str = Field(default="whois", description="whois 可执行文件路径")
    timeout: float = Field(default=30.0, gt=0, description="单次查询超时（秒）")
    min_interval: float = Field(default=1.0, ge=0, description="两次查询之间的最小间隔（秒）")


class OutputConfig(BaseModel):
    """
    输出配置模型
    """
    output_dir: str = Field(default="emails", description="报告文件输出目录")
    json_output: bool = Field(default=False, description="是否以 JSON 格式输出")


class AppConfig(BaseModel):
    """
    应用全局配置模型
    """
    reporter: ReporterConfig = Field(default_factory=ReporterConfig)
    whois: WhoisConfig = Field(default_factory=WhoisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    server: Dict[str, Any] = Field(default_factory=lambda: {"host": "127.0.0.1", "port": 3000})


class Config:
    """
    配置管理器（单例模式）

    配置加载优先级（由高到低）：
    1. 环境变量 (ENV)
    2. config.yaml
    3. config.json
    4. 默认值

    配置文件目录默认为项目根目录，可通过 LOG2ABUSE_CONFIG 指定具体文件。
    """
    _instance = None
    _model: AppConfig = None

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """
        初始化配置管理器

        Args:
            config_path: 指定配置文件（.yaml/.yml/.json），为空时按默认位置查找
        """
        config_path = config_path or os.environ.get("LOG2ABUSE_CONFIG")
        self.config_yaml: Optional[Path] = None
        self.config_json: Optional[Path] = None
        if config_path:
            path = Path(config_path)
            if path.suffix == ".json":
                self.config_json = path
            else:
                self.config_yaml = path
        else:
            # 定位配置文件路径
            base_dir = Path(__file__).resolve().parent.parent
            self.config_yaml = base_dir / "config.yaml"
            self.config_json = base_dir / "config.json"

        self.data = self._load_config()
        self._model = self._build_model(self.data)

    @classmethod
    def get_instance(cls) -> 'Config':
        """
        获取配置单例实例

        Returns:
            Config: 配置管理器单例
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _build_model(self, data: Dict[str, Any]) -> AppConfig:
        """
        使用 Pydantic 校验配置，非法值整体回退为默认值

        Args:
            data: 合并后的配置字典

        Returns:
            AppConfig: 校验后的配置模型
        """
        try:
            return AppConfig(**data)
        except ValidationError as e:
            logger.warning(f"配置校验失败，使用默认配置: {e}")
            self.data = self._default_config()
            return AppConfig(**self.data)

    def _load_config(self) -> Dict[str, Any]:
        """
        加载配置文件并合并

        Returns:
            Dict[str, Any]: 合并后的配置字典
        """
        config = self._default_config()

        # 1. 尝试加载 config.yaml (优先级高于 json)
        if self.config_yaml and self.config_yaml.exists():
            try:
                with open(self.config_yaml, 'r', encoding='utf-8') as f:
                    content = f.read()
                    # 简单的环境变量替换支持 (仅用于替换 ${VAR} 格式)
                    for key, value in os.environ.items():
                        content = content.replace(f"${{{key}}}", value)

                    yaml_config = yaml.safe_load(content)
                    if isinstance(yaml_config, dict):
                        self._deep_update(config, yaml_config)
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"加载 {self.config_yaml} 失败: {e}")

        # 2. 尝试加载 config.json
        elif self.config_json and self.config_json.exists():
            try:
                with open(self.config_json, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    if isinstance(file_config, dict):
                        self._deep_update(config, file_config)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"加载 {self.config_json} 失败: {e}")

        # 3. 环境变量覆盖 (最高优先级)
        self._apply_env_vars(config)

        return config

    def _deep_update(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> None:
        """
        递归合并字典

        Args:
            base_dict: 基础字典 (将被修改)
            update_dict: 更新字典
        """
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value

    def _apply_env_vars(self, config: Dict[str, Any]) -> None:
        """
        应用环境变量覆盖配置

        支持的环境变量:
        - LOG2ABUSE_SENDER_EMAIL / LOG2ABUSE_SENDER_NAME / LOG2ABUSE_SENDER_ORG
        - LOG2ABUSE_MAX_LOGS: 覆盖 reporter.max_logs_per_ip
        - LOG2ABUSE_THRESHOLD: 覆盖 reporter.threshold
        - LOG2ABUSE_WHOIS_PATH: 覆盖 whois.whois_path
        - LOG2ABUSE_WHOIS_TIMEOUT: 覆盖 whois.timeout
        - LOG2ABUSE_OUTPUT_DIR: 覆盖 output.output_dir
        - MCP_SERVER_HOST / MCP_SERVER_PORT: 覆盖 server.host / server.port
        """
        string_vars = {
            "LOG2ABUSE_SENDER_EMAIL": ("reporter", "sender_email"),
            "LOG2ABUSE_SENDER_NAME": ("reporter", "sender_name"),
            "LOG2ABUSE_SENDER_ORG": ("reporter", "sender_org"),
            "LOG2ABUSE_WHOIS_PATH": ("whois", "whois_path"),
            "LOG2ABUSE_OUTPUT_DIR": ("output", "output_dir"),
            "MCP_SERVER_HOST": ("server", "host"),
        }
        for env_name, (section, key) in string_vars.items():
            value = os.environ.get(env_name)
            if value:
                config[section][key] = value

        numeric_vars = {
            "LOG2ABUSE_MAX_LOGS": ("reporter", "max_logs_per_ip", int),
            "LOG2ABUSE_THRESHOLD": ("reporter", "threshold", int),
            "LOG2ABUSE_WHOIS_TIMEOUT": ("whois", "timeout", float),
            "MCP_SERVER_PORT": ("server", "port", int),
        }
        for env_name, (section, key, cast) in numeric_vars.items():
            value = os.environ.get(env_name)
            if not value:
                continue
            try:
                config[section][key] = cast(value)
            except ValueError:
                logger.warning(f"环境变量 {env_name} 格式错误: {value}")

    def _default_config(self) -> Dict[str, Any]:
        """
        生成默认配置

        Returns:
            Dict[str, Any]: 默认配置字典
        """
        return AppConfig().model_dump()

    @property
    def sender_email(self) -> str:
        """获取发件人邮箱"""
        return self._model.reporter.sender_email

    @property
    def sender_name(self) -> str:
        """获取发件人显示名"""
        return self._model.reporter.sender_name

    @property
    def sender_org(self) -> str:
        """获取落款组织"""
        return self._model.reporter.sender_org

    @property
    def max_logs_per_ip(self) -> int:
        """获取每个 IP 的最大日志行数"""
        return self._model.reporter.max_logs_per_ip

    @property
    def threshold(self) -> int:
        """获取 IP 最小出现次数"""
        return self._model.reporter.threshold

    @property
    def whois_path(self) -> str:
        """获取 whois 路径"""
        return self._model.whois.whois_path

    @property
    def whois_timeout(self) -> float:
        """获取 whois 查询超时"""
        return self._model.whois.timeout

    @property
    def whois_min_interval(self) -> float:
        """获取 whois 查询最小间隔"""
        return self._model.whois.min_interval

    @property
    def output_dir(self) -> str:
        """获取报告输出目录"""
        return self._model.output.output_dir

    @property
    def json_output(self) -> bool:
        """是否默认输出 JSON"""
        return self._model.output.json_output

    @property
    def server_host(self) -> str:
        return self._model.server.get("host", "127.0.0.1")

    @property
    def server_port(self) -> int:
        return int(self._model.server.get("port", 3000))

    def report_options(self, **overrides: Any) -> ReportOptions:
        """
        构建报告选项，未提供或为 None 的覆盖项使用配置值

        Returns:
            ReportOptions: 报告生成选项
        """
        values = {
            "sender_email": self.sender_email,
            "sender_name": self.sender_name,
            "sender_org": self.sender_org,
            "max_logs_per_ip": self.max_logs_per_ip,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ReportOptions(**values)


# 全局配置单例
config = Config.get_instance()

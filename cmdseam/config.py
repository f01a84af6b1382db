"""
Configuration settings for the command seam servers
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass, field

DEFAULT_INTRO_MESSAGE = "cmdseam command line interface"


def _env_port(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"{name} must be between 0 and 65535, got {port}")
    return port


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LineServerConfig:
    """Configuration for the line protocol (TCP CLI) server"""
    address: str = "127.0.0.1"
    port: int = 4100  # 0 picks a free port
    intro_message: str = DEFAULT_INTRO_MESSAGE

    @classmethod
    def from_env(cls) -> "LineServerConfig":
        """Create config from environment variables"""
        return cls(
            address=os.getenv("CMDSEAM_LINE_ADDRESS", "127.0.0.1"),
            port=_env_port("CMDSEAM_LINE_PORT", 4100),
            intro_message=os.getenv("CMDSEAM_LINE_INTRO", DEFAULT_INTRO_MESSAGE),
        )


@dataclass
class RpcServerConfig:
    """Configuration for the JSON-RPC server"""
    address: str = "127.0.0.1"
    port: int = 4101  # 0 binds a random free port

    @property
    def endpoint(self) -> str:
        return f"tcp://{self.address}:{self.port}"

    @classmethod
    def from_env(cls) -> "RpcServerConfig":
        """Create config from environment variables"""
        return cls(
            address=os.getenv("CMDSEAM_RPC_ADDRESS", "127.0.0.1"),
            port=_env_port("CMDSEAM_RPC_PORT", 4101),
        )


@dataclass
class ServiceConfig:
    """Main configuration: which adapters to run plus tracing"""
    line: Optional[LineServerConfig] = field(default_factory=LineServerConfig)
    rpc: Optional[RpcServerConfig] = field(default_factory=RpcServerConfig)

    # Tracing configuration
    enable_tracing: bool = False
    service_name: str = "cmdseam"
    otlp_endpoint: str = "localhost:4317"

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Create config from environment variables"""
        return cls(
            line=None if _env_flag("CMDSEAM_DISABLE_LINE") else LineServerConfig.from_env(),
            rpc=None if _env_flag("CMDSEAM_DISABLE_RPC") else RpcServerConfig.from_env(),
            enable_tracing=_env_flag("CMDSEAM_ENABLE_TRACING"),
            service_name=os.getenv("CMDSEAM_SERVICE_NAME", "cmdseam"),
            otlp_endpoint=os.getenv("CMDSEAM_OTLP_ENDPOINT", "localhost:4317"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for diagnostics"""
        return {
            "line_enabled": self.line is not None,
            "line_address": self.line.address if self.line else None,
            "line_port": self.line.port if self.line else None,
            "rpc_enabled": self.rpc is not None,
            "rpc_endpoint": self.rpc.endpoint if self.rpc else None,
            "enable_tracing": self.enable_tracing,
            "service_name": self.service_name,
        }
